# meeting_mailer/services/email_render.py
"""
HTML body for the summary email.

Summary and action-item text are inserted as-is (no HTML escaping): the
content comes from the LLM and from the caller and is trusted here.
"""
from __future__ import annotations

from typing import List, Sequence

from ..schemas import ActionItem, Recipient, recipient_display

NO_RECIPIENTS = "No recipients selected"
NO_TIMELINE = "Not specified"
TEST_MODE_NOTICE = (
    "TEST MODE: this message was delivered to the operator address only. "
    "It was not sent to the intended recipients listed below."
)

EMAIL_STYLESHEET = """
      body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
      .notice { background-color: #fff3cd; border: 1px solid #ffe08a; padding: 10px; border-radius: 5px; margin-bottom: 10px; }
      .recipients { background-color: #eef4fb; padding: 10px; border-radius: 5px; margin-bottom: 15px; }
      .summary { background-color: #f4f4f4; padding: 15px; border-radius: 5px; }
      table { width: 100%; border-collapse: collapse; margin-top: 10px; }
      th { background-color: #e9e9e9; padding: 10px; text-align: left; border: 1px solid #ddd; }
      td { padding: 10px; border: 1px solid #ddd; }
"""


def recipients_banner(recipients: Sequence[Recipient]) -> str:
    shown = [recipient_display(r) for r in recipients]
    return ", ".join(shown) if shown else NO_RECIPIENTS


def _row(item: ActionItem) -> str:
    return f"""
          <tr>
            <td>{item.item or ""}</td>
            <td>{item.owner or ""}</td>
            <td>{item.timeline or NO_TIMELINE}</td>
          </tr>"""


def render_email(
    summary: str,
    action_items: Sequence[ActionItem],
    recipients: Sequence[Recipient],
    *,
    test_mode: bool = False,
) -> str:
    notice = f'\n        <div class="notice">{TEST_MODE_NOTICE}</div>' if test_mode else ""
    rows: List[str] = [_row(ai) for ai in action_items]
    body = (summary or "").replace("\n", "<br>")

    return f"""
    <html>
      <head>
        <meta charset="utf-8">
        <style>{EMAIL_STYLESHEET}    </style>
      </head>
      <body>{notice}
        <div class="recipients"><strong>Intended recipients:</strong> {recipients_banner(recipients)}</div>

        <h2>Meeting Summary</h2>
        <div class="summary">
          {body}
        </div>

        <h2>Action Items</h2>
        <table>
          <tr>
            <th>Action Item</th>
            <th>Owner</th>
            <th>Timeline</th>
          </tr>{"".join(rows)}
        </table>
      </body>
    </html>"""
