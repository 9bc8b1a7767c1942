"""
Review API Routes

Post-publish performance reviews. Submitting a review stamps the script's
publish date and folds the numbers into the channel baselines.
"""

import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, status

from app.api.dependencies import (
    CurrentUserDep,
    ReviewRepoDep,
    ScriptRepoDep,
    UserSettingsRepoDep,
)
from app.domain.models import ReviewCreate, ReviewResponse
from app.domain.reviews import history_baselines, is_above_average
from app.infrastructure.exceptions import NotFoundError


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/reviews", response_model=List[ReviewResponse])
async def list_reviews(user_id: CurrentUserDep, reviews: ReviewRepoDep):
    return await reviews.list_for_user(user_id)


@router.post(
    "/scripts/{script_id}/review",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_review(
    script_id: int,
    data: ReviewCreate,
    user_id: CurrentUserDep,
    scripts: ScriptRepoDep,
    reviews: ReviewRepoDep,
    settings_repo: UserSettingsRepoDep,
):
    """
    Record how a published script performed.

    The review is above average when it is the owner's first, or when it
    beats the mean views or mean retention of earlier reviews. All writes
    share the request session.
    """
    script = await scripts.get_for_user(user_id, script_id)
    if not script:
        raise NotFoundError(f"Script {script_id} not found", operation="review", table="scripts")

    history = await reviews.performance_history(user_id)
    above_average = is_above_average(data.views, data.retention_percentage, history)

    review = await reviews.create_for_script(user_id, script_id, data, above_average)
    await scripts.set_published_date(user_id, script_id, datetime.now(timezone.utc))

    user_settings = await settings_repo.get_by_user_id(user_id)
    if user_settings:
        baseline_views, baseline_retention = history_baselines(
            history, data.views, data.retention_percentage
        )
        await settings_repo.update_for_user(
            user_id,
            {
                "channel_baseline_views": baseline_views,
                "channel_baseline_retention": baseline_retention,
                "has_pending_review": False,
                "pending_review_script_id": None,
            },
        )

    logger.info(
        f"Review {review.id} for script {script_id} "
        f"({'above' if above_average else 'below'} average)"
    )
    return review
