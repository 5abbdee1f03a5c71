"""
Tests for player registration and login
"""
from datetime import datetime, timedelta

from conftest import make_event
from models.player import Player


class TestRegistration:
    """Test player registration endpoints"""

    def register(self, client, team_id, username="new_player", password="pass1234"):
        return client.post("/auth/register", json={
            "team_id": team_id,
            "name": "New Player",
            "username": username,
            "password": password
        })

    def test_register_player(self, client, db_session):
        hunt = make_event(db_session, team_count=1)
        hunt["teams"][0].max_players = 3
        db_session.commit()

        response = self.register(client, hunt["teams"][0].id)
        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "new_player"
        assert "password" not in data

        player = db_session.query(Player).filter(Player.username == "new_player").first()
        assert player.password_hash != "pass1234"
        assert player.verify_password("pass1234")

    def test_register_full_team(self, client, db_session):
        hunt = make_event(db_session, team_count=1)
        hunt["teams"][0].max_players = 1
        db_session.commit()

        response = self.register(client, hunt["teams"][0].id)
        assert response.status_code == 400
        assert "full" in response.json()["detail"]

    def test_register_invalid_username(self, client, db_session):
        hunt = make_event(db_session, team_count=1)
        response = self.register(client, hunt["teams"][0].id, username="Not Valid")
        assert response.status_code == 422

    def test_register_short_password(self, client, db_session):
        hunt = make_event(db_session, team_count=1)
        response = self.register(client, hunt["teams"][0].id, password="123")
        assert response.status_code == 422

    def test_register_duplicate_username(self, client, db_session):
        hunt = make_event(db_session, team_count=2)
        response = self.register(client, hunt["teams"][1].id, username="player_1")
        assert response.status_code == 400

    def test_register_inactive_event(self, client, db_session):
        hunt = make_event(db_session, team_count=1, is_active=False)
        response = self.register(client, hunt["teams"][0].id)
        assert response.status_code == 400
        assert response.json()["code"] == "registration_closed"

    def test_register_outside_window(self, client, db_session):
        hunt = make_event(
            db_session,
            team_count=1,
            registration_start=datetime.utcnow() - timedelta(days=2),
            registration_end=datetime.utcnow() - timedelta(days=1)
        )
        response = self.register(client, hunt["teams"][0].id)
        assert response.json()["code"] == "registration_closed"

    def test_available_teams(self, client, db_session):
        hunt = make_event(db_session, team_count=2)
        hunt["teams"][0].max_players = 1
        hunt["teams"][1].max_players = 4
        db_session.commit()

        response = client.get("/teams/available")
        assert response.status_code == 200
        teams = response.json()
        assert [t["id"] for t in teams] == [hunt["teams"][1].id]
        assert teams[0]["current_members"] == 1

    def test_available_teams_without_active_event(self, client, db_session):
        make_event(db_session, is_active=False)
        assert client.get("/teams/available").json() == []


class TestLogin:
    """Test player login endpoint"""

    def test_login(self, client, db_session):
        hunt = make_event(db_session, team_count=1)

        response = client.post("/auth/login", json={"username": "player_1", "password": "secret"})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["team_id"] == hunt["teams"][0].id

        progress = client.get("/hunt/progress", headers={"Authorization": f"Bearer {data['token']}"})
        assert progress.status_code == 200
        assert progress.json()["state"] == "waiting_for_hunt_start"

    def test_login_wrong_password(self, client, db_session):
        make_event(db_session, team_count=1)
        response = client.post("/auth/login", json={"username": "player_1", "password": "nope"})
        assert response.status_code == 401

    def test_login_disqualified_team(self, client, db_session):
        hunt = make_event(db_session, team_count=1)
        hunt["teams"][0].is_disqualified = True
        db_session.commit()

        response = client.post("/auth/login", json={"username": "player_1", "password": "secret"})
        assert response.status_code == 403

    def test_invalid_bearer_token(self, client):
        response = client.get("/hunt/progress", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
