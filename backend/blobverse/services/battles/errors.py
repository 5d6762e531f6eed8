class BattleError(Exception):
    """Base for failures reported back to the offending client as ERROR."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SessionNotFound(BattleError):
    pass


class SessionConflict(BattleError):
    pass


class MalformedEvent(Exception):
    """Inbound frame that cannot be turned into an event. Logged, never answered."""
