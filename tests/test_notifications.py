"""
Tests for the hunt notification side-channel
"""
from conftest import make_event, player_headers, start
from models.team_clue_order import TeamClueOrder
from services import notifications


class TestHuntEventBus:
    def test_subscriber_receives_events(self):
        bus = notifications.HuntEventBus()
        received = []
        bus.subscribe(received.append)

        bus.publish(notifications.HUNT_STARTED, "event-1", teams_ready=2)
        assert [e.kind for e in received] == ["hunt_started"]
        assert received[0].payload == {"teams_ready": 2}

    def test_failing_subscriber_does_not_break_publish(self):
        bus = notifications.HuntEventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(received.append)
        bus.publish(notifications.HUNT_STOPPED, "event-1")
        assert len(received) == 1

    def test_unsubscribe(self):
        bus = notifications.HuntEventBus()
        received = []
        unsubscribe = bus.subscribe(received.append)
        unsubscribe()
        bus.publish(notifications.HUNT_STOPPED, "event-1")
        assert received == []

    def test_recent_is_scoped_and_bounded(self):
        bus = notifications.HuntEventBus(buffer_size=3)
        for _ in range(5):
            bus.publish(notifications.TEAM_ADVANCED, "event-1")
        bus.publish(notifications.TEAM_ADVANCED, "event-2")

        recent = bus.recent("event-1")
        assert [e.sequence for e in recent] == [4, 5]
        assert [e.sequence for e in bus.recent("event-1", after=4)] == [5]


class TestFeedRoute:
    def test_scan_publishes_team_advanced(self, client, db_session):
        hunt = make_event(db_session, clue_count=2, team_count=1)
        start(db_session, hunt)
        team = hunt["teams"][0]
        headers = player_headers(hunt["players"][0])
        row = db_session.query(TeamClueOrder).filter(
            TeamClueOrder.team_id == team.id, TeamClueOrder.step_index == 0
        ).first()

        client.post("/hunt/scan", headers=headers, json={"token": hunt["tokens"][row.clue_id]})

        feed = client.get("/hunt/feed", headers=headers).json()
        assert [item["kind"] for item in feed] == ["hunt_started", "team_advanced"]
        assert feed[1]["team_id"] == team.id
        assert feed[1]["payload"]["points"] == 10

        newer = client.get(f"/hunt/feed?after={feed[0]['sequence']}", headers=headers).json()
        assert [item["kind"] for item in newer] == ["team_advanced"]
