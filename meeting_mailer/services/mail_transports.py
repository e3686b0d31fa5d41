# meeting_mailer/services/mail_transports.py
from __future__ import annotations

import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage
from email.utils import make_msgid, parseaddr
from typing import Optional

import httpx

from ..errors import DeliveryError

logger = logging.getLogger("meeting_mailer.transport")


class MailTransport(ABC):
    """Delivers one HTML message to one address. Returns the provider message id, if any."""

    name: str = "transport"

    @abstractmethod
    def send_message(self, sender: str, to: str, subject: str, html: str) -> Optional[str]:
        ...

    def close(self) -> None:
        pass


# ---------- HTTP email API (Resend-compatible) ----------
class ApiMailTransport(MailTransport):
    name = "api"

    def __init__(self, api_key: str, *, url: str = "https://api.resend.com/emails", http: Optional[httpx.Client] = None,
                 timeout_s: float = 30.0) -> None:
        self._api_key = api_key
        self._url = url
        self._owns_http = http is None
        self._http = http or httpx.Client(timeout=timeout_s)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def send_message(self, sender: str, to: str, subject: str, html: str) -> Optional[str]:
        payload = {"from": sender, "to": [to], "subject": subject, "html": html}
        try:
            r = self._http.post(
                self._url,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"Email API request failed for {to}: {e}", recipient=to) from e

        if r.status_code >= 400:
            raise DeliveryError(f"Email API rejected message to {to}: {_api_error_text(r)}", recipient=to)
        logger.debug("[transport] api accepted message to %s", to)

        try:
            body = r.json()
        except ValueError:
            return None
        return body.get("id") if isinstance(body, dict) else None


def _api_error_text(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return f"HTTP {r.status_code} {r.text[:200]}".strip()
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error")
        if isinstance(msg, dict):
            msg = msg.get("message")
        if msg:
            return f"HTTP {r.status_code} {msg}"
    return f"HTTP {r.status_code}"


# ---------- SMTP ----------
class SmtpMailTransport(MailTransport):
    name = "smtp"

    def __init__(self, host: str, port: int = 587, *, user: Optional[str] = None, password: Optional[str] = None,
                 secure: bool = False, timeout_s: float = 30.0) -> None:
        self.host = host
        self.port = port
        self._user = user
        self._password = password
        self.secure = secure
        self.timeout_s = timeout_s

    def _connect(self) -> smtplib.SMTP:
        if self.secure:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout_s)
        conn = smtplib.SMTP(self.host, self.port, timeout=self.timeout_s)
        conn.ehlo()
        if conn.has_extn("starttls"):
            conn.starttls()
            conn.ehlo()
        return conn

    def send_message(self, sender: str, to: str, subject: str, html: str) -> Optional[str]:
        msg = EmailMessage()
        try:
            msg["From"] = sender
            msg["To"] = to
            msg["Subject"] = subject
        except ValueError as e:
            # header injection (CR/LF) or an unparsable address
            raise DeliveryError(f"Cannot address message to {to!r}: {e}", recipient=to) from e
        msg["Message-ID"] = make_msgid(domain=parseaddr(sender)[1].rpartition("@")[2] or "localhost")
        msg.set_content("This message contains an HTML meeting summary.")
        msg.add_alternative(html, subtype="html")

        try:
            with self._connect() as conn:
                if self._user:
                    conn.login(self._user, self._password or "")
                conn.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"SMTP delivery to {to} failed: {e}", recipient=to) from e
        logger.debug("[transport] smtp %s:%s accepted message to %s", self.host, self.port, to)
        return msg["Message-ID"]
