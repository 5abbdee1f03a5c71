"""
Tests for the error taxonomy and the CORS origin rules
"""
import re

from main import LOCALHOST_ORIGIN_REGEX
from services.errors import HintNotYetAvailable, PersistenceError, WrongClue


class TestHuntError:
    def test_default_message(self):
        error = WrongClue()
        assert str(error) == WrongClue.message
        assert error.to_dict() == {
            "success": False,
            "code": "wrong_clue",
            "message": WrongClue.message,
            "retriable": False,
        }

    def test_custom_message_does_not_leak_to_class(self):
        error = PersistenceError("Failed to record scan")
        assert error.message == "Failed to record scan"
        assert PersistenceError().message == "An error occurred, please try again"

    def test_context_is_part_of_body(self):
        body = HintNotYetAvailable(remaining_seconds=42).to_dict()
        assert body["remaining_seconds"] == 42
        assert body["retriable"] is True


class TestLocalhostOrigins:
    def test_any_localhost_port_matches(self):
        for origin in ["http://localhost", "http://localhost:3000", "http://localhost:5173"]:
            assert re.match(LOCALHOST_ORIGIN_REGEX, origin)

    def test_other_hosts_do_not_match(self):
        for origin in ["http://localhost.evil.com", "https://example.com", "http://localhost:*"]:
            assert not re.match(LOCALHOST_ORIGIN_REGEX, origin)
