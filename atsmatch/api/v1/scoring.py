from fastapi import APIRouter, Depends, HTTPException, Request, status

from atsmatch.ai.service import ReasoningService, get_reasoning_service
from atsmatch.core.errors import InputInvalid
from atsmatch.core.rate_limit import rate_limit
from atsmatch.features.section_classifier import classify_blocks, split_resume_blocks
from atsmatch.schemas.api import ClassifySectionsRequest, ClassifySectionsResponse, MatchRequest, ScoreRequest
from atsmatch.schemas.keywords import KeywordAnalysis
from atsmatch.schemas.scoring import ScoreReport
from atsmatch.services.matching_service import analyze_keywords
from atsmatch.services.scoring_service import score_resume

router = APIRouter()


def _bad_request(exc: InputInvalid) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"code": exc.code, "message": str(exc)},
    )


@router.post("/match", response_model=KeywordAnalysis)
@rate_limit()
async def match_keywords(
    request: Request,
    payload: MatchRequest,
    service: ReasoningService = Depends(get_reasoning_service),
):
    _ = request
    try:
        return await analyze_keywords(payload.job_description, payload.resume_content, service=service)
    except InputInvalid as exc:
        raise _bad_request(exc) from exc


@router.post("/score", response_model=ScoreReport)
@rate_limit()
async def score(
    request: Request,
    payload: ScoreRequest,
    service: ReasoningService = Depends(get_reasoning_service),
):
    _ = request
    try:
        return await score_resume(
            payload.job_description,
            payload.resume_content,
            keyword_analysis=payload.keyword_analysis,
            service=service,
        )
    except InputInvalid as exc:
        raise _bad_request(exc) from exc


@router.post("/sections/classify", response_model=ClassifySectionsResponse)
@rate_limit()
async def classify_sections(request: Request, payload: ClassifySectionsRequest):
    _ = request
    blocks = payload.blocks or split_resume_blocks(payload.content)
    if not blocks:
        raise _bad_request(InputInvalid("Provide blocks or content to classify"))
    return ClassifySectionsResponse(blocks=classify_blocks(blocks))
