# meeting_mailer/errors.py
from __future__ import annotations

from typing import Optional


class MailerError(Exception):
    """
    Base for every failure the pipeline reports to a caller.
    The HTTP layer turns these into {"success": false, "error": <message>}.
    """
    status_code: int = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# ---------- intake ----------
class UploadError(MailerError):
    status_code = 500


class UploadLimitError(UploadError):
    status_code = 400


class ParseError(MailerError):
    status_code = 400


class ContactParseError(ParseError):
    pass


# ---------- summary ----------
class SummaryGenerationError(MailerError):
    status_code = 502


class SummaryParseError(MailerError):
    status_code = 502


# ---------- dispatch ----------
class DispatchConfigurationError(MailerError):
    status_code = 503


class DeliveryError(MailerError):
    status_code = 502

    def __init__(self, message: str, *, recipient: Optional[str] = None, delivered: Optional[list] = None):
        super().__init__(message)
        self.recipient = recipient
        # addresses that already received the message before the failure
        self.delivered = list(delivered or [])
