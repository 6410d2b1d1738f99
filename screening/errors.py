"""
Screening exceptions.

Clients raise these; the screener turns source failures into per-source
errors on the result and the CLI maps them to exit codes.
"""


class ScreeningError(Exception):
    """Base class for all screening errors."""


class InvalidMintError(ScreeningError):
    """Input is not a valid Solana mint address."""

    def __init__(self, address, reason: str = "invalid pubkey"):
        self.address = address
        self.reason = reason
        super().__init__(f"{reason}: {address!r}")


class SourceUnavailableError(ScreeningError):
    """A data source could not be reached or returned an unusable answer."""

    def __init__(self, source: str, message: str, status=None):
        self.source = source
        self.status = status
        super().__init__(f"{source}: {message}")


class ReportNotFoundError(ScreeningError):
    """The source answered but has no data for this mint."""

    def __init__(self, source: str, mint: str, status=None):
        self.source = source
        self.mint = mint
        self.status = status
        super().__init__(f"{source}: no report for {mint} (HTTP {status})")


class ChecklistParseError(ScreeningError):
    """Malformed checklist markdown."""


class ConfigError(ScreeningError):
    """Invalid screening configuration."""
