"""Exception hierarchy for PrintTrack.

The maintenance calculator never raises; these errors belong to the
record store, the OctoPrint client and the API/CLI layers around it.
"""


class PrintTrackError(Exception):
    """Base error for PrintTrack."""


class NotFoundError(PrintTrackError):
    """A record does not exist or is not owned by the caller."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class DuplicateIntervalError(PrintTrackError):
    """An interval already exists for the printer and maintenance type."""

    def __init__(self, printer_id: str, maintenance_type: str):
        self.printer_id = printer_id
        self.maintenance_type = maintenance_type
        super().__init__(
            f"Interval already set for printer {printer_id} and type '{maintenance_type}'"
        )


class ValidationError(PrintTrackError):
    """Input failed validation."""


class AuthenticationError(PrintTrackError):
    """Credentials or token are missing or invalid."""


class OctoPrintError(PrintTrackError):
    """OctoPrint request failed."""

    def __init__(self, message: str, status: int = 0):
        self.status = status
        super().__init__(message)


class OctoPrintNotConfigured(PrintTrackError):
    """Printer has no OctoPrint URL or API key."""
