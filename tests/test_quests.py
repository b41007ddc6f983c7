"""Tests for quest completion scoring."""

import pytest

from wikiquest import db
from wikiquest.models import Quest, QuestProgress, User
from wikiquest.services import QuestService


class RacingQuestService(QuestService):
    """Lets a second submission of the same quest finish between our read and write."""

    def __init__(self, score, total_possible):
        super().__init__()
        self.race = (score, total_possible)

    def _find_progress(self, user_id, quest_id):
        seen = super()._find_progress(user_id, quest_id)
        if self.race:
            score, total_possible = self.race
            self.race = None
            QuestService(self.progression).complete_quest(
                db.session.get(User, user_id),
                db.session.get(Quest, quest_id),
                score,
                total_possible,
            )
        return seen


class TestEarnedXP:
    """QuestService.earned_xp."""

    @pytest.mark.parametrize(
        "score,total,expected",
        [(5, 5, 100), (3, 5, 60), (0, 5, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13)],
    )
    def test_proportional(self, score, total, expected):
        """Test XP is proportional to the score and rounded half up."""
        quest = Quest(title="q", xp_reward=100)
        assert QuestService.earned_xp(quest, score, total) == expected

    def test_zero_total_awards_nothing(self):
        """Test a quest with nothing to score awards no XP."""
        quest = Quest(title="q", xp_reward=100)
        assert QuestService.earned_xp(quest, 0, 0) == 0


class TestConcurrentCompletion:
    """Two submissions of one quest racing each other."""

    def test_first_completion_race_pays_once(self, app, quest, test_user):
        """Test racing first completions pay the quest XP once."""
        service = RacingQuestService(5, 5)

        completion = service.complete_quest(
            db.session.get(User, test_user["id"]),
            db.session.get(Quest, quest["id"]),
            5,
            5,
        )

        assert completion.xp_awarded == 0
        assert completion.progress.attempts == 2

        user = db.session.get(User, test_user["id"])
        assert user.total_xp == 100
        assert QuestProgress.query.filter_by(user_id=test_user["id"]).count() == 1

    def test_improvement_race_pays_once(self, app, quest, test_user):
        """Test racing improvements pay the difference once."""
        user = db.session.get(User, test_user["id"])
        QuestService().complete_quest(user, db.session.get(Quest, quest["id"]), 3, 5)

        completion = RacingQuestService(5, 5).complete_quest(
            db.session.get(User, test_user["id"]),
            db.session.get(Quest, quest["id"]),
            5,
            5,
        )

        assert completion.xp_awarded == 0

        user = db.session.get(User, test_user["id"])
        assert user.total_xp == 100
        progress = QuestProgress.query.filter_by(user_id=test_user["id"]).one()
        assert progress.earned_xp == 100
        assert progress.attempts == 3


class TestCompleteQuest:
    """POST /quests/<id>/complete."""

    def _complete(self, auth_client, quest_id, score, total):
        return auth_client.post(
            f"/api/v1/quests/{quest_id}/complete",
            json={"score": score, "totalPossible": total},
        )

    def test_first_completion(self, auth_client, quest, test_user):
        """Test the first completion pays proportional XP."""
        response = self._complete(auth_client, quest["id"], 4, 5)
        assert response.status_code == 200
        data = response.json["data"]
        assert data["earnedXP"] == 80
        assert data["xpAwarded"] == 80
        assert data["totalXP"] == 80
        assert data["progress"]["completed"] is True
        assert data["progress"]["attempts"] == 1

        user = db.session.get(User, test_user["id"])
        assert user.total_xp == 80

    def test_retry_awards_only_improvement(self, auth_client, quest, test_user):
        """Test a better retry pays only the difference."""
        self._complete(auth_client, quest["id"], 3, 5)
        data = self._complete(auth_client, quest["id"], 5, 5).json["data"]

        assert data["earnedXP"] == 100
        assert data["xpAwarded"] == 40
        assert data["totalXP"] == 100
        assert data["progress"]["attempts"] == 2

    def test_worse_retry_keeps_best(self, auth_client, quest, test_user):
        """Test a worse retry pays nothing and keeps the best score."""
        self._complete(auth_client, quest["id"], 5, 5)
        data = self._complete(auth_client, quest["id"], 1, 5).json["data"]

        assert data["xpAwarded"] == 0
        assert data["totalXP"] == 100

        progress = QuestProgress.query.filter_by(
            user_id=test_user["id"], quest_id=quest["id"]
        ).one()
        assert progress.score == 5
        assert progress.earned_xp == 100

    def test_completion_can_level_up(self, auth_client, quest, set_progress):
        """Test quest XP can cross a level threshold."""
        set_progress(total_xp=250)

        data = self._complete(auth_client, quest["id"], 5, 5).json["data"]
        assert data["leveledUp"] is True
        assert data["currentLevel"] == 2

    def test_unknown_quest(self, auth_client):
        """Test completing a missing quest returns 404."""
        response = self._complete(auth_client, 9999, 1, 1)
        assert response.status_code == 404
        assert response.json["error"]["code"] == "NOT_FOUND"

    def test_inactive_quest(self, auth_client, quest):
        """Test an inactive quest cannot be completed."""
        db.session.get(Quest, quest["id"]).is_active = False
        db.session.commit()

        assert self._complete(auth_client, quest["id"], 1, 1).status_code == 404

    def test_score_above_total_rejected(self, auth_client, quest):
        """Test a score above the maximum is a validation error."""
        response = self._complete(auth_client, quest["id"], 6, 5)
        assert response.status_code == 400
        assert "score" in response.json["error"]["details"]

    def test_negative_score_rejected(self, auth_client, quest):
        """Test a negative score is rejected."""
        assert self._complete(auth_client, quest["id"], -1, 5).status_code == 400

    def test_huge_score_rejected(self, auth_client, quest):
        """Test scores too large to store are rejected."""
        response = self._complete(auth_client, quest["id"], 10**19, 10**19)
        assert response.status_code == 400

    def test_missing_fields(self, auth_client, quest):
        """Test a body without totalPossible is rejected."""
        response = auth_client.post(
            f"/api/v1/quests/{quest['id']}/complete", json={"score": 1}
        )
        assert response.status_code == 400

    def test_completed_quests_show_in_stats(self, auth_client, quest):
        """Test completed quests are counted in the stats."""
        self._complete(auth_client, quest["id"], 5, 5)

        data = auth_client.get("/api/v1/users/stats").json["data"]
        assert data["completedQuests"] == 1
        assert data["activeQuests"] == 0
