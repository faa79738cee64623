from fastapi import APIRouter, Depends

from atsmatch.ai.service import ReasoningService, get_reasoning_service

router = APIRouter()


@router.get("/health", summary="Health Check", description="Report service health and reasoning backend status.")
async def health_check(service: ReasoningService = Depends(get_reasoning_service)):
    return {
        "status": "healthy",
        "reasoningService": "enabled" if service.enabled else "disabled",
    }
