# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class PipelineEventType(str, Enum):
    CONNECT = "connect"
    STATUS = "status"
    SUMMARY = "summary"
    SCHOLARSHIP = "scholarship"
    RECOMMENDATIONS = "recommendations"
    RESOURCES = "resources"
    COMPLETE = "complete"
    ERROR = "error"
    TIMEOUT = "timeout"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    INVALID_REQUEST = ErrorInfo("Invalid request", status.HTTP_400_BAD_REQUEST)
    INVALID_SEARCH_TYPE = ErrorInfo("Invalid search type", status.HTTP_400_BAD_REQUEST)
    INCOMPLETE_PARAMETERS = ErrorInfo(
        "Search parameters are incomplete", status.HTTP_400_BAD_REQUEST
    )
    REQUEST_TIMEOUT = ErrorInfo("Request timed out", status.HTTP_408_REQUEST_TIMEOUT)
    INTERNAL_ERROR = ErrorInfo(
        "Failed to process request", status.HTTP_500_INTERNAL_SERVER_ERROR
    )


class StreamState(str, Enum):
    CONNECTING = "connecting"
    PARSING = "parsing"
    CLARIFICATION_PENDING = "clarification_pending"
    SEARCHING = "searching"
    GENERATING = "generating"
    EMITTING_SUMMARY = "emitting_summary"
    EMITTING_SCHOLARSHIPS = "emitting_scholarships"
    EMITTING_EXTRAS = "emitting_extras"
    COMPLETE = "complete"
    ERRORED = "errored"
    TIMED_OUT = "timed_out"
