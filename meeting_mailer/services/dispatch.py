# meeting_mailer/services/dispatch.py
"""
Notification dispatch.

Two strategies share one call shape, send(sender, to, subject, html):

- RedirectDispatcher: a single message to a fixed operator address. The real
  recipients only appear in the email body (the renderer's banner).
- DirectDispatcher: one message per recipient, in order. The first failure
  stops the loop and is raised; messages already sent stay sent.

Which one is used is decided by EMAIL_MODE in build_dispatcher().
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Union

import httpx

from ..config import Settings
from ..errors import DeliveryError, DispatchConfigurationError
from ..schemas import DeliveryResult
from .mail_transports import ApiMailTransport, MailTransport, SmtpMailTransport

logger = logging.getLogger("meeting_mailer.dispatch")

Addresses = Union[str, Sequence[str]]


def _as_list(to: Addresses) -> List[str]:
    if isinstance(to, str):
        return [to]
    return list(to)


class EmailDispatcher(ABC):
    mode: str = ""
    # True when the real recipients never receive the message
    redirects: bool = False

    def __init__(self, transport: MailTransport) -> None:
        self.transport = transport

    @abstractmethod
    def send(self, sender: str, to: Addresses, subject: str, html: str) -> DeliveryResult:
        ...


class RedirectDispatcher(EmailDispatcher):
    mode = "redirect"
    redirects = True

    def __init__(self, transport: MailTransport, operator_address: str) -> None:
        super().__init__(transport)
        self.operator_address = operator_address

    def send(self, sender: str, to: Addresses, subject: str, html: str) -> DeliveryResult:
        intended = _as_list(to)
        logger.info(
            "[dispatch] redirect: %d intended recipient(s) -> operator %s", len(intended), self.operator_address
        )
        message_id = self.transport.send_message(sender, self.operator_address, subject, html)
        return DeliveryResult(
            mode="redirect",
            delivered_to=[self.operator_address],
            intended_recipients=intended,
            message_ids=[message_id],
        )


class DirectDispatcher(EmailDispatcher):
    mode = "direct"

    def send(self, sender: str, to: Addresses, subject: str, html: str) -> DeliveryResult:
        recipients = _as_list(to)
        delivered: List[str] = []
        message_ids: List[Optional[str]] = []

        for address in recipients:
            try:
                message_ids.append(self.transport.send_message(sender, address, subject, html))
            except DeliveryError as e:
                logger.error(
                    "[dispatch] direct: failed at %s after %d/%d sent: %s",
                    address, len(delivered), len(recipients), e,
                )
                raise DeliveryError(e.message, recipient=address, delivered=delivered) from e
            delivered.append(address)
            logger.info("[dispatch] direct: sent to %s", address)

        return DeliveryResult(
            mode="direct",
            delivered_to=delivered,
            intended_recipients=recipients,
            message_ids=message_ids,
        )


# ---------- wiring ----------
def build_transport(settings: Settings, *, http: Optional[httpx.Client] = None) -> MailTransport:
    kind = settings.EMAIL_TRANSPORT or ("api" if settings.EMAIL_API_KEY else "smtp")

    if kind == "api":
        if not settings.EMAIL_API_KEY:
            raise DispatchConfigurationError("Email is not configured: EMAIL_API_KEY is not set")
        return ApiMailTransport(
            settings.EMAIL_API_KEY, url=settings.EMAIL_API_URL, http=http, timeout_s=settings.EMAIL_TIMEOUT_S
        )
    if kind == "smtp":
        if not settings.EMAIL_HOST:
            raise DispatchConfigurationError(
                "Email is not configured: set EMAIL_API_KEY or EMAIL_HOST/EMAIL_PORT/EMAIL_USER/EMAIL_PASS"
            )
        return SmtpMailTransport(
            settings.EMAIL_HOST,
            settings.EMAIL_PORT,
            user=settings.EMAIL_USER,
            password=settings.EMAIL_PASS,
            secure=settings.EMAIL_SECURE,
            timeout_s=settings.EMAIL_TIMEOUT_S,
        )
    raise DispatchConfigurationError(f"Unknown EMAIL_TRANSPORT {kind!r}; expected 'api' or 'smtp'")


def build_dispatcher(settings: Settings, *, http: Optional[httpx.Client] = None) -> EmailDispatcher:
    """Raises DispatchConfigurationError instead of failing at import/startup."""
    if not settings.EMAIL_FROM:
        raise DispatchConfigurationError("Email is not configured: EMAIL_FROM is not set")

    transport = build_transport(settings, http=http)
    mode = (settings.EMAIL_MODE or "direct").lower()
    if mode == "redirect":
        if not settings.OPERATOR_EMAIL:
            raise DispatchConfigurationError("EMAIL_MODE=redirect requires OPERATOR_EMAIL")
        return RedirectDispatcher(transport, settings.OPERATOR_EMAIL)
    if mode == "direct":
        return DirectDispatcher(transport)
    raise DispatchConfigurationError(f"Unknown EMAIL_MODE {mode!r}; expected 'direct' or 'redirect'")
