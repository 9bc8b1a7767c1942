"""
Integration Tests for Ideas, Reviews, Settings and the Pipeline Summary
"""

from datetime import datetime, timezone

import pytest
from unittest.mock import AsyncMock

from app.domain.models import ScriptCreate, SettingsUpdate
from app.infrastructure.db.dependencies import get_review_repository
from app.infrastructure.db.models import Idea, Review, UserSettings


NOW = datetime(2026, 10, 1, tzinfo=timezone.utc)


def idea(**overrides):
    values = {
        "id": 4,
        "user_id": "user_2test",
        "title": "Behind the edit",
        "description": "Show the timeline",
        "topic": "workflow",
        "hook_type": "story",
        "priority": "medium",
        "status": "captured",
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return Idea(**values)


@pytest.fixture
def mock_review_repo(authed_app):
    repo = AsyncMock()
    authed_app.dependency_overrides[get_review_repository] = lambda: repo
    return repo


class TestIdeas:

    def test_create_idea(self, authed_client, user_id, mock_idea_repo):
        mock_idea_repo.create_for_user.return_value = idea()

        response = authed_client.post("/api/ideas", json={"title": "  Behind the edit  "})

        assert response.status_code == 201
        _, data = mock_idea_repo.create_for_user.await_args.args
        assert data.title == "Behind the edit"

    def test_blank_title_rejected(self, authed_client, mock_idea_repo):
        response = authed_client.post("/api/ideas", json={"title": "   "})

        assert response.status_code == 422

    def test_list_filters_by_status(self, authed_client, mock_idea_repo):
        mock_idea_repo.list_for_user.return_value = [
            idea(id=1, status="captured"),
            idea(id=2, status="archived"),
        ]

        response = authed_client.get("/api/ideas", params={"status_filter": "archived"})

        assert [row["id"] for row in response.json()] == [2]

    def test_promote_creates_linked_script(
        self, authed_client, user_id, mock_idea_repo, mock_script_repo, script_factory
    ):
        mock_idea_repo.get_for_user.return_value = idea()
        mock_script_repo.create_for_user.return_value = script_factory(id=11, stage="idea", idea_id=4)

        response = authed_client.post("/api/ideas/4/promote")

        assert response.status_code == 201
        assert response.json()["id"] == 11
        owner, data = mock_script_repo.create_for_user.await_args.args
        assert isinstance(data, ScriptCreate)
        assert data.title == "Behind the edit"
        assert data.notes_content == "Show the timeline"
        assert mock_script_repo.create_for_user.await_args.kwargs["idea_id"] == 4
        mock_idea_repo.update_fields.assert_awaited_once_with(
            user_id, 4, {"status": "promoted", "promoted_to_script_id": 11}
        )

    @pytest.mark.parametrize("status", ["promoted", "archived"])
    def test_promote_conflicts(self, authed_client, mock_idea_repo, mock_script_repo, status):
        mock_idea_repo.get_for_user.return_value = idea(status=status)

        response = authed_client.post("/api/ideas/4/promote")

        assert response.status_code == 409
        mock_script_repo.create_for_user.assert_not_awaited()

    def test_promote_cannot_start_in_ready(self, authed_client, mock_idea_repo, mock_script_repo):
        mock_idea_repo.get_for_user.return_value = idea()

        response = authed_client.post("/api/ideas/4/promote", json={"stage": "ready"})

        assert response.status_code == 422


class TestReviews:

    def _review(self, above):
        return Review(
            id=1,
            user_id="user_2test",
            script_id=3,
            views=5000,
            retention_percentage=45,
            what_worked="Cold open",
            what_didnt_work="Long intro",
            changes_for_next_time="Cut intro",
            is_above_average=above,
            created_at=NOW,
            updated_at=NOW,
        )

    def _payload(self):
        return {
            "views": 5000,
            "retention_percentage": 45,
            "what_worked": "Cold open",
            "what_didnt_work": "Long intro",
            "changes_for_next_time": "Cut intro",
        }

    def test_review_updates_baselines_and_publish_date(
        self,
        authed_client,
        user_id,
        mock_script_repo,
        mock_review_repo,
        mock_settings_repo,
        script_factory,
    ):
        mock_script_repo.get_for_user.return_value = script_factory(id=3, stage="published")
        mock_review_repo.performance_history.return_value = [(1000, 30), (3000, 50)]
        mock_review_repo.create_for_script.return_value = self._review(True)
        mock_settings_repo.get_by_user_id.return_value = UserSettings(
            user_id=user_id,
            channel_baseline_views=2000,
            channel_baseline_retention=40,
            has_pending_review=True,
            pending_review_script_id=3,
        )

        response = authed_client.post("/api/scripts/3/review", json=self._payload())

        assert response.status_code == 201
        assert response.json()["is_above_average"] is True
        args = mock_review_repo.create_for_script.await_args.args
        assert args[0] == user_id and args[1] == 3 and args[3] is True
        mock_script_repo.set_published_date.assert_awaited_once()
        _, values = mock_settings_repo.update_for_user.await_args.args
        assert values["channel_baseline_views"] == pytest.approx(3000)
        assert values["channel_baseline_retention"] == pytest.approx(125 / 3)
        assert values["has_pending_review"] is False
        assert values["pending_review_script_id"] is None

    def test_baselines_ignore_stale_settings(
        self,
        authed_client,
        user_id,
        mock_script_repo,
        mock_review_repo,
        mock_settings_repo,
        script_factory,
    ):
        mock_script_repo.get_for_user.return_value = script_factory(id=3, stage="published")
        mock_review_repo.performance_history.return_value = [(1000, 50), (3000, 70)]
        mock_review_repo.create_for_script.return_value = self._review(False)
        mock_settings_repo.get_by_user_id.return_value = UserSettings(
            user_id=user_id,
            channel_baseline_views=0,
            channel_baseline_retention=0,
        )
        payload = self._payload()
        payload.update(views=2000, retention_percentage=60)

        response = authed_client.post("/api/scripts/3/review", json=payload)

        assert response.status_code == 201
        _, values = mock_settings_repo.update_for_user.await_args.args
        assert values["channel_baseline_views"] == pytest.approx(2000)
        assert values["channel_baseline_retention"] == pytest.approx(60)

    def test_review_without_settings_row(
        self, authed_client, mock_script_repo, mock_review_repo, mock_settings_repo, script_factory
    ):
        mock_script_repo.get_for_user.return_value = script_factory(id=3)
        mock_review_repo.performance_history.return_value = []
        mock_review_repo.create_for_script.return_value = self._review(True)
        mock_settings_repo.get_by_user_id.return_value = None

        response = authed_client.post("/api/scripts/3/review", json=self._payload())

        assert response.status_code == 201
        mock_settings_repo.update_for_user.assert_not_awaited()

    def test_blank_reflection_rejected(self, authed_client, mock_script_repo, mock_review_repo, mock_settings_repo):
        payload = self._payload()
        payload["what_worked"] = "  "

        response = authed_client.post("/api/scripts/3/review", json=payload)

        assert response.status_code == 422


class TestSettings:

    def test_defaults_without_row(self, authed_client, mock_settings_repo):
        mock_settings_repo.get_by_user_id.return_value = None

        response = authed_client.get("/api/settings")

        assert response.status_code == 200
        assert response.json()["default_words_per_minute"] == 150

    @pytest.mark.parametrize("plan", [None, "Creator"])
    def test_update_requires_pro(self, authed_client, mock_settings_repo, set_entitlement, plan):
        set_entitlement(plan)

        response = authed_client.put("/api/settings", json={"max_concurrent_drafts": 3})

        assert response.status_code == 403
        mock_settings_repo.upsert_preferences.assert_not_awaited()

    def test_update_for_pro(self, authed_client, user_id, mock_settings_repo, set_entitlement):
        set_entitlement("Pro")
        mock_settings_repo.upsert_preferences.return_value = UserSettings(
            user_id=user_id, max_concurrent_drafts=3
        )

        response = authed_client.put("/api/settings", json={"max_concurrent_drafts": 3})

        assert response.status_code == 200
        assert response.json()["max_concurrent_drafts"] == 3
        owner, data = mock_settings_repo.upsert_preferences.await_args.args
        assert owner == user_id
        assert isinstance(data, SettingsUpdate)


class TestPipelineSummary:

    def test_summary(self, authed_client, mock_script_repo, script_factory):
        mock_script_repo.list_for_user.return_value = [
            script_factory(id=1, stage="ready"),
            script_factory(id=2, stage="draft"),
        ]

        response = authed_client.get("/api/pipeline/summary")

        assert response.status_code == 200
        body = response.json()
        assert body["stage_counts"]["ready"] == 1
        assert body["unscheduled_ready_ids"] == [1]
        assert body["total"] == 2
