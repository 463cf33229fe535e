# controller/search_controller.py
from fastapi import APIRouter, Body, Depends
from fastapi.responses import StreamingResponse
from controller.controller_dependencies import (
    get_scholarship_service,
    rate_limit_dependencies,
)
from model.api import (
    ClarifyRequest,
    GenerateResultsRequest,
    ParseQueryRequest,
    SearchRequest,
    SearchWebRequest,
)
from service.scholarship_service import ScholarshipService
from util.constants import InternalURIs
from util.enums import ErrorMessage
from util.errors import AppError

search_router = APIRouter(dependencies=rate_limit_dependencies())

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@search_router.post(InternalURIs.SEARCH)
async def search(
    payload: SearchRequest = Body(..., discriminator="searchType"),
    service: ScholarshipService = Depends(get_scholarship_service),
):
    """Single endpoint; `searchType` selects the operation."""
    if isinstance(payload, ParseQueryRequest):
        return await service.parse_query(payload.query)

    if isinstance(payload, SearchWebRequest):
        return await service.search_web(payload.params)

    if isinstance(payload, ClarifyRequest):
        return service.clarify(payload.params, payload.answers)

    if isinstance(payload, GenerateResultsRequest):
        generator = service.stream_results(payload.params, payload.searchResults)
        return StreamingResponse(
            generator, media_type="text/event-stream", headers=SSE_HEADERS
        )

    info = ErrorMessage.INVALID_SEARCH_TYPE.value
    raise AppError(info.message, info.http_status)
