from types import SimpleNamespace
from typing import List, Optional

import pytest

from meeting_mailer.config import Settings
from meeting_mailer.errors import DeliveryError
from meeting_mailer.services.mail_transports import MailTransport


class FakeCompletions:
    def __init__(self, content: Optional[str] = None, exc: Optional[Exception] = None):
        self.content = content
        self.exc = exc
        self.calls: List[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


class FakeLLM:
    """Stands in for openai.OpenAI: only chat.completions.create is used."""

    def __init__(self, content: Optional[str] = None, exc: Optional[Exception] = None):
        self.completions = FakeCompletions(content, exc)
        self.chat = SimpleNamespace(completions=self.completions)


class FakeTransport(MailTransport):
    name = "fake"

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.attempts: List[str] = []
        self.sent: List[dict] = []

    def send_message(self, sender, to, subject, html):
        self.attempts.append(to)
        if to in self.fail_on:
            raise DeliveryError(f"mailbox unavailable: {to}", recipient=to)
        self.sent.append({"from": sender, "to": to, "subject": subject, "html": html})
        return f"msg-{len(self.sent)}"


@pytest.fixture
def settings(tmp_path):
    s = Settings()
    s.OPENAI_API_KEY = None
    s.MODEL_NAME = "gpt-4-turbo"
    s.LLM_JSON_MODE = True
    s.TEMPERATURE = None
    s.MAX_TOKENS = None
    s.EMAIL_MODE = "direct"
    s.EMAIL_TRANSPORT = None
    s.EMAIL_API_KEY = None
    s.EMAIL_HOST = None
    s.EMAIL_FROM = "Meeting Bot <bot@example.com>"
    s.OPERATOR_EMAIL = None
    s.EMAIL_SUBJECT = "Meeting Summary and Action Items"
    s.UPLOAD_DIR = str(tmp_path / "uploads")
    s.MAX_UPLOAD_FILES = 10
    s.MAX_UPLOAD_BYTES = 50 * 1024 * 1024
    s.KEEP_UPLOADS = False
    return s
