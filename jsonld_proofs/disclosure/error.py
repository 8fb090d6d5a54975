"""Selective disclosure errors."""

from typing import Optional

from ..core.error import JsonLdProofsError


class DisclosureError(JsonLdProofsError):
    """Base error for preparing a disclosed credential."""


class InvalidDisclosureError(DisclosureError):
    """The disclosed credential is not a valid redaction of its original."""


class ConflictError(DisclosureError):
    """A pseudonym stands for more than one value within a presentation."""

    def __init__(self, pseudonym: str, value1: str, value2: str, **kwargs):
        """Initialize a ConflictError instance."""
        super().__init__(
            f"pseudonym `{pseudonym}` corresponds to multiple values: "
            f"`{value1}` and `{value2}`",
            **kwargs,
        )
        self.pseudonym = pseudonym
        self.value1 = value1
        self.value2 = value2


class MissingMappingError(DisclosureError):
    """A masked literal has no deanonymization entry to extend."""


class PathError(DisclosureError):
    """A path does not resolve against a document tree."""

    def __init__(self, message: str, path: Optional[tuple] = None, **kwargs):
        """Initialize a PathError instance."""
        super().__init__(message, **kwargs)
        self.path = path
