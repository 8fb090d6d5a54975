"""Common exception classes."""


class BaseError(Exception):
    """Generic exception class which other exceptions should inherit from."""

    def __init__(self, *args, error_code: str = None, **kwargs):
        """Initialize a BaseError instance."""
        super().__init__(*args, **kwargs)
        self.error_code = error_code

    @property
    def message(self) -> str:
        """Accessor for the error message."""
        return str(self.args[0]).strip() if self.args else ""

    @property
    def roll_up(self) -> str:
        """Messages of this error and its chained causes, on one line."""
        messages = []
        err = self
        while err is not None:
            text = " ".join(str(err).split()) or err.__class__.__name__
            messages.append(text.rstrip("."))
            err = err.__cause__
        return ". ".join(messages) + "."


class JsonLdProofsError(BaseError):
    """Base error for JSON-LD proof operations."""
