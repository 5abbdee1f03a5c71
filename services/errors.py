"""
Closed set of outcomes the hunt engine can reject an action with

Every error carries a stable code, the HTTP status the API answers with,
a message a team can act on, and whether retrying the same action may succeed.
"""
from typing import Any, Dict, Optional


class HuntError(Exception):
    code = "hunt_error"
    status_code = 400
    message = "Action rejected"
    retriable = True

    def __init__(self, message: Optional[str] = None, **context: Any):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "code": self.code,
            "message": self.message,
            "retriable": self.retriable,
            **self.context,
        }


class TeamNotFound(HuntError):
    code = "team_not_found"
    status_code = 404
    message = "Team not found"


class EventNotFound(HuntError):
    code = "event_not_found"
    status_code = 404
    message = "Event not found"


class NotFound(HuntError):
    code = "not_found"
    status_code = 404
    message = "Clue order not found"


class Disqualified(HuntError):
    code = "disqualified"
    status_code = 403
    message = "Your team has been disqualified"
    retriable = False


class EventInactive(HuntError):
    code = "event_inactive"
    status_code = 403
    message = "This event is not currently active"


class HuntNotStarted(HuntError):
    code = "hunt_not_started"
    status_code = 403
    message = "The hunt hasn't been started yet. Wait for the organizer!"


class HuntTimedOut(HuntError):
    code = "hunt_timed_out"
    status_code = 403
    message = "Time's up! The hunt has ended."
    retriable = False


class InvalidToken(HuntError):
    code = "invalid_token"
    status_code = 400
    message = "Invalid QR code"


class HuntAlreadyComplete(HuntError):
    code = "hunt_already_complete"
    status_code = 400
    message = "No more clues to scan - hunt complete!"
    retriable = False


class WrongClue(HuntError):
    code = "wrong_clue"
    status_code = 400
    message = "Wrong QR code! This is not your next clue."
    retriable = False


class AlreadyScanned(HuntError):
    code = "already_scanned"
    status_code = 409
    message = "You've already scanned this clue"


class HintNotYetAvailable(HuntError):
    code = "hint_not_yet_available"
    status_code = 400
    message = "Hint not available yet"


class NoCluesConfigured(HuntError):
    code = "no_clues_configured"
    status_code = 400
    message = "No clues found for this event. Add clues first!"


class RegistrationClosed(HuntError):
    code = "registration_closed"
    status_code = 400
    message = "Registration is closed for this event"


class PersistenceError(HuntError):
    code = "persistence_error"
    status_code = 500
    message = "An error occurred, please try again"
