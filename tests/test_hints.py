"""
Tests for timed hints
"""
from datetime import datetime, timedelta

from conftest import make_event, player_headers, start
from models.team_clue_order import TeamClueOrder


class TestHintRoutes:
    """Test clue start and hint endpoints"""

    def setup_hunt(self, db_session, hint_delay_minutes=5):
        hunt = make_event(db_session, clue_count=3, team_count=1, hint_delay_minutes=hint_delay_minutes)
        start(db_session, hunt)
        team = hunt["teams"][0]
        current = db_session.query(TeamClueOrder).filter(
            TeamClueOrder.team_id == team.id,
            TeamClueOrder.step_index == 0
        ).first()
        return hunt, team, current, player_headers(hunt["players"][0])

    def open_clue_minutes_ago(self, db_session, clue_order, minutes):
        clue_order.clue_started_at = datetime.utcnow() - timedelta(minutes=minutes)
        db_session.commit()

    def test_current_clue(self, client, db_session):
        hunt, team, current, headers = self.setup_hunt(db_session)

        response = client.get("/hunt/current", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "in_progress"
        assert data["step"] == 0
        assert data["total_clues"] == 3
        assert data["clue_order_id"] == current.id
        assert data["clue_id"] == current.clue_id
        assert data["has_hint"] is True
        assert data["hint_text"] is None
        assert data["hint_seconds_remaining"] is None
        assert 0 < data["hunt_seconds_remaining"] <= 3600

    def test_current_clue_before_start(self, client, db_session):
        hunt = make_event(db_session)
        response = client.get("/hunt/current", headers=player_headers(hunt["players"][0]))
        assert response.json()["state"] == "waiting_for_hunt_start"
        assert response.json()["clue_id"] is None

    def test_start_clue_sets_timestamp_once(self, client, db_session):
        hunt, team, current, headers = self.setup_hunt(db_session)

        first = client.post("/hunt/start-clue", headers=headers, json={"clue_order_id": current.id})
        assert first.status_code == 200
        started_at = first.json()["clue_started_at"]
        assert started_at is not None

        second = client.post("/hunt/start-clue", headers=headers, json={"clue_order_id": current.id})
        assert second.json()["clue_started_at"] == started_at

    def test_start_clue_of_other_team(self, client, db_session):
        hunt = make_event(db_session, clue_count=2, team_count=2)
        start(db_session, hunt)
        other_row = db_session.query(TeamClueOrder).filter(
            TeamClueOrder.team_id == hunt["teams"][1].id
        ).first()

        response = client.post("/hunt/start-clue", headers=player_headers(hunt["players"][0]),
                               json={"clue_order_id": other_row.id})
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_future_clue_cannot_be_started(self, client, db_session):
        hunt, team, current, headers = self.setup_hunt(db_session)
        future = db_session.query(TeamClueOrder).filter(
            TeamClueOrder.team_id == team.id,
            TeamClueOrder.step_index == 1
        ).first()

        response = client.post("/hunt/start-clue", headers=headers, json={"clue_order_id": future.id})
        assert response.status_code == 400
        assert response.json()["code"] == "wrong_clue"

        db_session.refresh(future)
        assert future.clue_started_at is None

    def test_hint_before_delay(self, client, db_session):
        hunt, team, current, headers = self.setup_hunt(db_session)
        client.post("/hunt/start-clue", headers=headers, json={"clue_order_id": current.id})

        response = client.post("/hunt/hint", headers=headers, json={"clue_id": current.clue_id})
        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "hint_not_yet_available"
        assert 0 < data["remaining_seconds"] <= 300

    def test_hint_before_clue_opened(self, client, db_session):
        hunt, team, current, headers = self.setup_hunt(db_session)

        response = client.post("/hunt/hint", headers=headers, json={"clue_id": current.clue_id})
        assert response.json()["code"] == "hint_not_yet_available"

    def test_hint_after_delay(self, client, db_session):
        hunt, team, current, headers = self.setup_hunt(db_session)
        self.open_clue_minutes_ago(db_session, current, 6)

        response = client.post("/hunt/hint", headers=headers, json={"clue_id": current.clue_id})
        assert response.status_code == 200
        data = response.json()
        assert data["already_viewed"] is False
        assert data["hint_text"].startswith("Hint ")

        db_session.refresh(current)
        assert current.hint_viewed is True
        assert current.hint_viewed_by == hunt["players"][0].id

    def test_hint_view_is_idempotent(self, client, db_session):
        hunt, team, current, headers = self.setup_hunt(db_session)
        self.open_clue_minutes_ago(db_session, current, 6)

        first = client.post("/hunt/hint", headers=headers, json={"clue_id": current.clue_id}).json()
        second = client.post("/hunt/hint", headers=headers, json={"clue_id": current.clue_id}).json()
        assert second["already_viewed"] is True
        assert second["hint_text"] == first["hint_text"]

    def test_hint_halves_points(self, client, db_session):
        hunt, team, current, headers = self.setup_hunt(db_session)
        self.open_clue_minutes_ago(db_session, current, 6)
        client.post("/hunt/hint", headers=headers, json={"clue_id": current.clue_id})

        response = client.post("/hunt/scan", headers=headers, json={"token": hunt["tokens"][current.clue_id]})
        data = response.json()
        assert data["points_earned"] == 5
        assert data["hint_used"] is True

        db_session.refresh(team)
        assert team.score == 5

    def test_zero_delay_hint_is_available_once_opened(self, client, db_session):
        hunt, team, current, headers = self.setup_hunt(db_session, hint_delay_minutes=0)
        client.post("/hunt/start-clue", headers=headers, json={"clue_order_id": current.id})

        response = client.post("/hunt/hint", headers=headers, json={"clue_id": current.clue_id})
        assert response.status_code == 200

    def test_hint_for_unknown_clue(self, client, db_session):
        hunt, team, current, headers = self.setup_hunt(db_session)
        response = client.post("/hunt/hint", headers=headers, json={"clue_id": "missing"})
        assert response.status_code == 404

    def test_hint_when_hunt_not_started(self, client, db_session):
        hunt = make_event(db_session)
        response = client.post("/hunt/hint", headers=player_headers(hunt["players"][0]),
                               json={"clue_id": hunt["clues"][0].id})
        assert response.json()["code"] == "hunt_not_started"
