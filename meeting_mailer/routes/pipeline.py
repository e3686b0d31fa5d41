# meeting_mailer/routes/pipeline.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Request, UploadFile

from ..config import Settings
from ..errors import SummaryGenerationError
from ..schemas import (
    SendEmailsIn,
    SendEmailsOut,
    SummaryIn,
    SummaryOut,
    UploadOut,
    recipient_address,
    recipient_display,
)
from ..services.dispatch import EmailDispatcher, build_dispatcher
from ..services.email_render import render_email
from ..services.intake import intake_files
from ..services.summarize import SummaryGenerator
from ..utils.io import remove_files

logger = logging.getLogger("meeting_mailer.api")

router = APIRouter(tags=["pipeline"])


# ---------- dependencies ----------
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_summary_generator(request: Request) -> SummaryGenerator:
    s: Settings = request.app.state.settings
    client = request.app.state.llm_client
    if client is None:
        raise SummaryGenerationError("OPENAI_API_KEY is not configured")
    return SummaryGenerator(
        client,
        model=s.MODEL_NAME,
        json_mode=s.LLM_JSON_MODE,
        temperature=s.TEMPERATURE,
        max_tokens=s.MAX_TOKENS,
    )


def get_dispatcher(request: Request) -> EmailDispatcher:
    # built per request so missing email settings surface as a 503, not a startup crash
    if request.app.state.dispatcher is not None:
        return request.app.state.dispatcher
    return build_dispatcher(request.app.state.settings, http=request.app.state.http)


# ---------- routes ----------
@router.get("/api/health")
def health():
    return {"ok": True, "time": datetime.now(timezone.utc).isoformat()}


@router.post("/upload", response_model=UploadOut)
async def upload(
    background: BackgroundTasks,
    files: Optional[List[UploadFile]] = File(default=None),
    s: Settings = Depends(get_settings),
):
    batch = []
    for f in files or []:
        batch.append((f.filename or "upload", await f.read()))

    processed = intake_files(
        batch,
        s.UPLOAD_DIR,
        max_files=s.MAX_UPLOAD_FILES,
        max_bytes=s.MAX_UPLOAD_BYTES,
    )
    if not s.KEEP_UPLOADS:
        background.add_task(remove_files, [p.stored_path for p in processed if p.stored_path])
    return UploadOut(files=processed)


@router.post("/generate-summary", response_model=SummaryOut)
def generate_summary(body: SummaryIn, generator: SummaryGenerator = Depends(get_summary_generator)):
    result = generator.generate(body.transcript)
    return SummaryOut(summary=result.summary, action_items=list(result.action_items))


@router.post("/send-emails", response_model=SendEmailsOut)
def send_emails(
    body: SendEmailsIn,
    dispatcher: EmailDispatcher = Depends(get_dispatcher),
    s: Settings = Depends(get_settings),
):
    html = render_email(body.summary, body.action_items, body.recipients, test_mode=dispatcher.redirects)

    addresses: List[str] = []
    for r in body.recipients:
        address = recipient_address(r)
        if address:
            addresses.append(address)
        else:
            logger.warning("[api] recipient without an email address skipped: %s", recipient_display(r))

    result = dispatcher.send(s.EMAIL_FROM or "", addresses, s.EMAIL_SUBJECT, html)

    if result.mode == "redirect":
        message = f"Test email sent to {result.delivered_to[0]} (intended for {len(body.recipients)} recipient(s))"
    else:
        message = "Emails sent successfully"
    return SendEmailsOut(
        message=message,
        mode=result.mode,
        delivered_to=result.delivered_to,
        intended_recipients=[recipient_display(r) for r in body.recipients],
    )
