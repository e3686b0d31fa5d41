from meeting_mailer.schemas import ActionItem, AddressRecord
from meeting_mailer.services.email_render import (
    NO_RECIPIENTS,
    TEST_MODE_NOTICE,
    recipients_banner,
    render_email,
)

SUMMARY = "First paragraph.\nSecond paragraph."
ITEMS = [
    ActionItem(item="Send the deck", owner="Alice", timeline="Monday"),
    ActionItem(item="Book the room", owner="Bob"),
]


def test_render_is_deterministic():
    recipients = ["a@example.com", AddressRecord(email="b@example.com", name="B")]
    assert render_email(SUMMARY, ITEMS, recipients) == render_email(SUMMARY, ITEMS, recipients)


def test_empty_recipients_banner():
    html = render_email(SUMMARY, ITEMS, [])
    assert NO_RECIPIENTS in html
    assert recipients_banner([]) == "No recipients selected"


def test_recipients_are_normalised_and_joined():
    recipients = [
        "a@example.com",
        AddressRecord(email="b@example.com", name="Bee"),
        AddressRecord(name="No Email"),
    ]
    banner = recipients_banner(recipients)
    assert banner.startswith("a@example.com, b@example.com, ")
    assert "No Email" in banner


def test_missing_timeline_renders_not_specified():
    html = render_email(SUMMARY, [ActionItem(item="Book the room", owner="Bob")], ["a@example.com"])
    assert "<td>Not specified</td>" in html


def test_missing_owner_and_item_render_empty():
    html = render_email(SUMMARY, [ActionItem(timeline="Q3")], [])
    assert "<td></td>" in html
    assert "None" not in html
    assert "<td>Q3</td>" in html


def test_rows_follow_input_order():
    html = render_email(SUMMARY, ITEMS, [])
    assert html.index("Send the deck") < html.index("Book the room")
    assert html.count("<tr>") == 1 + len(ITEMS)


def test_newlines_become_line_breaks():
    html = render_email(SUMMARY, [], [])
    assert "First paragraph.<br>Second paragraph." in html


def test_summary_is_not_escaped():
    html = render_email("<b>Decided</b> & done", [], [])
    assert "<b>Decided</b> & done" in html


def test_test_mode_notice_is_a_fixed_constant():
    plain = render_email(SUMMARY, ITEMS, [])
    flagged = render_email(SUMMARY, ITEMS, [], test_mode=True)
    assert TEST_MODE_NOTICE not in plain
    assert TEST_MODE_NOTICE in flagged
    assert flagged == render_email(SUMMARY, ITEMS, [], test_mode=True)
