"""Error kinds raised by the introspector and the row/table services."""


class PanelError(Exception):
    """Base error; `message` is the summary, `details` the diagnostic text."""

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.message}: {self.details}" if self.details else self.message


class QueryError(PanelError):
    """A database statement failed (connectivity, syntax, constraint)."""


class NotFoundError(PanelError):
    """The row or table an id-scoped operation expected is absent."""


class ValidationError(PanelError):
    """Request content was rejected before any statement ran."""
