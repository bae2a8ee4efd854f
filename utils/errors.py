# utils/errors.py


class ScriptureError(Exception):
    """Base class for errors raised by the scripture core."""


class MalformedDocument(ScriptureError):
    """A corpus document could not be decoded against the expected structure."""

    def __init__(self, label, reason):
        self.label = label
        self.reason = reason
        super().__init__(f"could not parse {label}: {reason}")


class InvalidReference(ScriptureError, ValueError):
    """A citation does not match the grammar of the requested lookup."""


class MissingArgument(ScriptureError, ValueError):
    """A required request argument is absent or empty."""
