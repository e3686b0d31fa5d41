# meeting_mailer/services/summarize.py
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from ..errors import SummaryGenerationError, SummaryParseError
from ..schemas import SummaryResult
from .summarize_prompts import JSON_ONLY_INSTRUCTION, SYSTEM_PROMPT, USER_TEMPLATE

logger = logging.getLogger("meeting_mailer.summarize")

DEFAULT_MODEL = "gpt-4-turbo"

# ```json ... ``` wrapper some models add when not in JSON mode
_FENCED = re.compile(r"^\s*```(?:json)?\s*\n(.*?)\n?```\s*$", re.S | re.I)


def build_messages(transcript: str, *, json_mode: bool = True) -> List[Dict[str, str]]:
    system = SYSTEM_PROMPT if json_mode else SYSTEM_PROMPT + JSON_ONLY_INSTRUCTION
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": USER_TEMPLATE.format(transcript=transcript)},
    ]


def parse_summary_payload(raw: Optional[str]) -> SummaryResult:
    """
    Turn the model's text into a SummaryResult or raise SummaryParseError.

    Accepted: a JSON object with a non-empty string "summary" and, optionally,
    an "actionItems" array of objects. Nothing is repaired or defaulted here
    beyond a missing "actionItems" becoming [].
    """
    text = (raw or "").strip()
    m = _FENCED.match(text)
    if m:
        text = m.group(1).strip()
    if not text:
        raise SummaryParseError("Model returned an empty response")

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise SummaryParseError(f"Model response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SummaryParseError(f"Model response must be a JSON object, got {type(data).__name__}")
    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise SummaryParseError("Model response has no 'summary' text")
    items = data.get("actionItems")
    if items is None:
        items = []
    if not isinstance(items, list):
        raise SummaryParseError("Model response 'actionItems' must be an array")

    try:
        return SummaryResult.model_validate({"summary": summary, "actionItems": items})
    except ValidationError as e:
        raise SummaryParseError(f"Model response does not match the summary schema: {e}") from e


class SummaryGenerator:
    """
    Transcript -> SummaryResult through one chat-completion call.

    `client` is an OpenAI client handle (anything with chat.completions.create).
    With json_mode the provider is asked for response_format=json_object;
    without it the system message carries the JSON-only instruction. The
    reply is validated the same way in both cases. No retries.
    """

    def __init__(
        self,
        client: Any,
        *,
        model: str = DEFAULT_MODEL,
        json_mode: bool = True,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._client = client
        self.model = model
        self.json_mode = json_mode
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _request_kwargs(self, transcript: str) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": build_messages(transcript, json_mode=self.json_mode),
        }
        if self.json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        if self.max_tokens is not None:
            kwargs["max_tokens"] = self.max_tokens
        return kwargs

    def generate(self, transcript: str) -> SummaryResult:
        kwargs = self._request_kwargs(transcript)
        logger.info(
            f"[summarize] model={self.model} json_mode={self.json_mode} transcript_chars={len(transcript)}"
        )
        try:
            resp = self._client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            logger.error(f"[summarize] provider error: {e}")
            raise SummaryGenerationError(str(e) or e.__class__.__name__) from e

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise SummaryParseError("Model response has no message content") from e

        result = parse_summary_payload(content)
        logger.info(f"[summarize] ok: summary_chars={len(result.summary)} action_items={len(result.action_items)}")
        return result


def make_openai_client(api_key: Optional[str], *, timeout_s: float = 60.0) -> Optional[OpenAI]:
    """One shared client per process; None when no key is configured."""
    if not api_key:
        logger.warning("[summarize] OPENAI_API_KEY missing; /generate-summary will fail until it is set")
        return None
    return OpenAI(api_key=api_key, timeout=timeout_s, max_retries=0)
