"""
Pipeline Dashboard API Routes
"""

from dataclasses import asdict

from fastapi import APIRouter

from app.api.dependencies import CurrentUserDep, ScriptRepoDep
from app.domain.models import PipelineSummaryResponse
from app.domain.pipeline import summarize_pipeline


router = APIRouter()


@router.get("/pipeline/summary", response_model=PipelineSummaryResponse)
async def get_pipeline_summary(user_id: CurrentUserDep, scripts: ScriptRepoDep):
    """Stage counts, stalled scripts and ready scripts still missing a date."""
    rows = await scripts.list_for_user(user_id)
    return PipelineSummaryResponse(**asdict(summarize_pipeline(rows)))
