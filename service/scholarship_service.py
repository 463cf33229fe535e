# service/scholarship_service.py
import logging
from typing import AsyncIterator, List, Mapping, Optional, Sequence
from core.streaming import StreamDispatcher
from model.api import (
    ClarificationQuestion,
    ParseQueryResponse,
    SearchWebResponse,
)
from model.search import EvidenceItem, ParametersDraft, SearchParameters
from util.constants import CLARIFICATION_QUESTIONS
from util.enums import ErrorMessage
from util.errors import AppError, ParseError, StageTimeoutError, classify

logger = logging.getLogger(__name__)


def _questions_for(missing: Sequence[str]) -> List[ClarificationQuestion]:
    out: List[ClarificationQuestion] = []
    for field in missing:
        q = CLARIFICATION_QUESTIONS.get(field)
        if q:
            out.append(ClarificationQuestion(field=field, **q))
    return out


def _to_app_error(exc: Exception) -> AppError:
    """Map a pipeline failure onto the synchronous error envelope."""
    err = classify(exc)
    if isinstance(err, StageTimeoutError):
        info = ErrorMessage.REQUEST_TIMEOUT.value
    else:
        info = ErrorMessage.INTERNAL_ERROR.value
    return AppError(info.message, info.http_status, details=err.message)


class ScholarshipService:
    """
    Request-scoped facade over the StreamDispatcher for the search endpoint.
    Synchronous operations raise AppError; the stream reports failures in-band.
    """

    def __init__(self, dispatcher: StreamDispatcher) -> None:
        self._dispatcher = dispatcher

    async def parse_query(self, query: str) -> ParseQueryResponse:
        logger.info("parse.start chars=%d", len(query))
        try:
            draft = await self._dispatcher.parse(query)
        except Exception as e:
            logger.error("parse.error kind=%s", type(e).__name__)
            raise _to_app_error(e) from e
        return ParseQueryResponse(
            data=draft.parameters,
            missingParams=list(draft.missingFields),
            questions=_questions_for(draft.missingFields),
        )

    async def search_web(self, params: SearchParameters) -> SearchWebResponse:
        items = await self._dispatcher.search(params)
        logger.info("search.ok count=%d", len(items))
        return SearchWebResponse(data=items)

    def clarify(
        self, params: SearchParameters, answers: Mapping[str, Optional[str]]
    ) -> ParseQueryResponse:
        """
        Merge clarification answers over the parsed parameters. One round only:
        a merge that is still incomplete is rejected.
        """
        draft = ParametersDraft.from_parameters(params)
        try:
            merged = draft.merge(answers)
        except ParseError as e:
            logger.warning("clarify.incomplete err=%s", e.message)
            info = ErrorMessage.INCOMPLETE_PARAMETERS.value
            raise AppError(info.message, info.http_status, details=e.message) from e
        logger.info("clarify.ok answered=%d", len(answers))
        return ParseQueryResponse(data=merged, missingParams=[])

    def stream_results(
        self,
        params: SearchParameters,
        evidence: Optional[Sequence[EvidenceItem]] = None,
    ) -> AsyncIterator[bytes]:
        return self._dispatcher.stream(params, evidence)
