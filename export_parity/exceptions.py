"""
Custom exception hierarchy for export comparison.

Only archive-level failures are raised out of a comparison run. Per-entry
problems (a single unparseable document) are caught by the orchestrator and
recorded as findings so one run surfaces every problem it can find.
"""


class ExportParityError(Exception):
    """
    Base exception for all export comparison errors.
    """

    pass


class ExtractionError(ExportParityError):
    """
    Raised when an archive root is not a readable directory tree, or when an
    export archive cannot be unpacked.

    This is fatal: the run aborts before any entry is compared.
    """

    pass


class ParseError(ExportParityError):
    """
    Raised when an entry's content is not valid structured data for its kind.

    Attributes:
        relative_path: Archive-relative path of the offending entry, if known
    """

    def __init__(self, message: str, relative_path: str = None):
        super().__init__(message)
        self.relative_path = relative_path
