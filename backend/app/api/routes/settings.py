"""
User Settings API Routes

Anyone may read their settings; editing them is a Pro feature.
"""

import logging

from fastapi import APIRouter, Depends

from app.api.dependencies import CurrentUserDep, UserSettingsRepoDep, require_plan
from app.domain.models import SettingsResponse, SettingsUpdate


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/settings", response_model=SettingsResponse)
async def get_settings(user_id: CurrentUserDep, settings_repo: UserSettingsRepoDep):
    """The caller's settings, or the defaults when none were saved."""
    user_settings = await settings_repo.get_by_user_id(user_id)
    if user_settings is None:
        return SettingsResponse()
    return user_settings


@router.put(
    "/settings",
    response_model=SettingsResponse,
    dependencies=[Depends(require_plan("Pro"))],
)
async def update_settings(
    data: SettingsUpdate,
    user_id: CurrentUserDep,
    settings_repo: UserSettingsRepoDep,
):
    user_settings = await settings_repo.upsert_preferences(user_id, data)
    logger.info(f"Updated settings for user {user_id}")
    return user_settings
