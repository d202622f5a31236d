from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from framesearch.models.interfaces import SearchQuery
from framesearch.models.schemas import ErrorResponse, SearchRequest, SearchResponse, SearchResultItem
from framesearch.services import search_pipeline
from framesearch.services.errors import SearchPipelineError
from framesearch.services.logger import logger

router = APIRouter(prefix="/api/search", tags=["search"])


@router.post(
    "",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search(request: SearchRequest | None = None):
    """Search upstream and return up to ten results, embeddable ones first."""
    request = request or SearchRequest()
    try:
        outcome = await search_pipeline.run_search(
            SearchQuery(text=request.query or "", filter_embeddable=request.filter_embeddable)
        )
    except SearchPipelineError as e:
        if e.status_code >= 500:
            logger.error(f"Search failed: {e}")
        return JSONResponse(status_code=e.status_code, content=e.to_body())
    except Exception as e:
        logger.exception("Unhandled search error")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to execute search", "details": str(e)},
        )

    return SearchResponse(
        items=[
            SearchResultItem(
                link=entry.item.link,
                title=entry.item.title,
                snippet=entry.item.snippet,
                displayable=entry.displayable,
            )
            for entry in outcome.items
        ]
    )


@router.api_route("", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def method_not_allowed(request: Request):
    return JSONResponse(
        status_code=405,
        content={"error": f"Method {request.method} Not Allowed"},
        headers={"Allow": "POST"},
    )


async def invalid_search_request(request: Request, exc: RequestValidationError):
    """Malformed bodies on the search endpoint get the structured 400 shape."""
    if request.url.path.rstrip("/") != router.prefix:
        return await request_validation_exception_handler(request, exc)
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    )
    logger.info(f"Rejected malformed search request: {problems}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid search request", "details": problems},
    )
