"""Exception hierarchy for the round-trip pipeline.

Recoverable conditions (malformed CSV rows, unknown ids, missing layout
metadata) are handled in place and never raised. These exceptions cover the
cases a host has to react to.
"""


class CopyDeckError(Exception):
    """Base class for pipeline errors."""


class DuplicateElementIdError(CopyDeckError, ValueError):
    """Two text elements in one prototype share an id."""

    def __init__(self, element_ids: list[str]) -> None:
        self.element_ids = element_ids
        joined = ", ".join(element_ids)
        super().__init__(f"Duplicate text element ids: {joined}")


class AcquisitionError(CopyDeckError):
    """An acquisition strategy could not produce elements from its input."""


class PublishError(CopyDeckError):
    """The publish endpoint rejected the artifact or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
