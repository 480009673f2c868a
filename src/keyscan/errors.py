"""
Exception types raised by keyscan.
"""


class KeyscanError(Exception):
    """Base class for all keyscan errors."""


class ParseError(KeyscanError):
    """A path query could not be parsed."""

    def __init__(self, reason: str, remainder: str):
        self.reason = reason
        self.remainder = remainder
        super().__init__(f"{reason} at {remainder!r}")


class KeyNotFoundError(KeyscanError, KeyError):
    """A parsed query names a key that is not in the tree."""

    def __init__(self, segment: str, path=()):
        self.segment = segment
        self.path = tuple(path)
        super().__init__(segment)

    def __str__(self) -> str:
        return f"Could not resolve key {self.segment}"


class DocumentLoadError(KeyscanError):
    """A document could not be read or is not a single JSON value."""
