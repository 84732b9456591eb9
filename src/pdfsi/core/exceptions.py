"""pdfsi custom exceptions."""

from __future__ import annotations


class InspectorConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    def __init__(self, message: str, config_path: str = None, section: str = None):
        self.config_path = config_path
        self.section = section
        super().__init__(message)

    def __str__(self):
        msg = super().__str__()
        if self.config_path:
            msg += f" (config: {self.config_path})"
        if self.section:
            msg += f" (section: {self.section})"
        return msg


class DetectorUnavailable(Exception):
    """The remote classifier could not produce a usable answer.

    Carried inside a RemoteResult rather than raised to detect() callers.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ExtractionError(Exception):
    """Raised when text cannot be extracted from an uploaded document."""

    def __init__(self, message: str, filename: str = None):
        self.filename = filename
        super().__init__(message)

    def __str__(self):
        msg = super().__str__()
        if self.filename:
            msg += f" (file: {self.filename})"
        return msg
