"""Error types raised by the drink journal core."""


class DrinkJournalError(Exception):
    """Base class for recoverable journal errors."""


class ValidationError(DrinkJournalError):
    """A record failed required-field or enum checks at the store boundary."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PersistenceFailure(DrinkJournalError):
    """Loading from or writing to the record repository failed."""

    def __init__(self, action: str, message: str) -> None:
        super().__init__(f"{action} failed: {message}")
        self.action = action
        self.message = message


class AdvisoryServiceFailure(DrinkJournalError):
    """A best-effort suggestion or calorie lookup failed."""
