"""POST /parser/normalize endpoint handler."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from pagescan.api.schemas import ErrorResponse, NormalizeRequest
from pagescan.api.service import get_normalized_content
from pagescan.auth.dependencies import require_api_key
from pagescan.parser import ExtractionEngine, ExtractionResult

router = APIRouter(dependencies=[Depends(require_api_key)])


def get_engine(request: Request) -> ExtractionEngine:
    return request.app.state.engine


@router.post(
    "/parser/normalize",
    response_model=ExtractionResult,
    responses={500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def normalize(
    body: NormalizeRequest,
    engine: ExtractionEngine = Depends(get_engine),
):
    return await get_normalized_content(engine, body)
