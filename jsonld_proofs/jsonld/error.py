"""Linked data errors."""

from ..core.error import JsonLdProofsError


class LinkedDataError(JsonLdProofsError):
    """Error converting or loading JSON-LD documents."""


class DocumentLoaderError(LinkedDataError):
    """A JSON-LD document could not be loaded."""
