# model/events.py
import json
from typing import Any
from pydantic import BaseModel
from util.enums import PipelineEventType


class PipelineEvent(BaseModel):
    """Wire unit of the result stream."""

    type: PipelineEventType
    data: Any = None

    def format(self) -> str:
        return f"event: {self.type.value}\ndata: {json.dumps(self.data, separators=(',', ':'))}\n\n"

    def encode(self) -> bytes:
        return self.format().encode("utf-8")
