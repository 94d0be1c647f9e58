"""Custom exception hierarchy for Moneylith.

The calculation engine never raises for malformed financial input. These
exceptions belong to the I/O surface: loading settings and input files.
"""


class MoneylithError(Exception):
    """Base exception for all Moneylith errors."""


class ConfigurationError(MoneylithError):
    """Raised when engine settings are invalid or cannot be loaded."""


class InputFileError(MoneylithError):
    """Raised when an input file is missing or does not contain valid records."""

    def __init__(self, path: object, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
