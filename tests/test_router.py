import asyncio

from conftest import FakeDisplay, FakeStatus, FakeTransport, build_stack

from report_issue.engine.session import FormMode
from report_issue.schemas.events import PanelOpened, TextSubmitted, WidgetAction
from report_issue.schemas.form import FormSchema


def _click(widget_id, type="clicked"):
    return WidgetAction(widget_id=widget_id, type=type)


def _run(stack, *events):
    async def main():
        for event in events:
            await stack.router.handle(event)

    asyncio.run(main())


def test_foreign_panel_is_ignored(stack, display):
    stack.session.set("category", "Request for a technician")
    _run(stack, PanelOpened(panel_id="someone-else"))

    assert display.calls == []
    assert stack.session.get("category") == "Request for a technician"


def test_own_panel_resets_and_renders_start(stack, display):
    stack.session.set("category", "Request for a technician")
    stack.session.set("name", "Ada")
    _run(stack, PanelOpened(panel_id="feedback"))

    assert stack.session.values == {}
    assert stack.session.mode is FormMode.START
    assert stack.renderer.last_document.widget_ids()[0] == "category-text"
    assert display.names() == ["save_panel"]


def test_selecting_an_option_sets_category_and_renders_form(stack):
    _run(stack, PanelOpened(panel_id="feedback"), _click("option2"))

    assert stack.session.get("category") == "Can't connect to my meeting"
    assert stack.session.mode is FormMode.FORM
    assert "submit" in stack.renderer.last_document.widget_ids()


def test_multi_digit_option_indexes(display, status, transport):
    schema = FormSchema.from_config(
        {
            "start": {"options": [f"Topic {i}" for i in range(13)]},
            "form": {"category": {"type": {"Text": {}, "Button": {"name": ["Pick"]}}, "action": "Options"}},
        }
    )
    stack = build_stack(schema, display, status, transport)
    _run(stack, _click("option12"))

    assert stack.session.get("category") == "Topic 12"


def test_out_of_range_option_is_ignored(stack, display):
    _run(stack, _click("option99"))

    assert stack.session.values == {}
    assert display.calls == []


def test_only_clicks_are_handled(stack, display):
    _run(stack, _click("option1", type="pressed"), _click("option1", type="released"))

    assert stack.session.values == {}
    assert display.calls == []


def test_submit_before_category_does_nothing(stack, display, transport):
    _run(stack, _click("submit"))

    assert display.calls == []
    assert transport.posts == []
    assert stack.router.last_submission is None


def test_unknown_widget_is_ignored(stack, display):
    _run(stack, _click("volume-slider"))

    assert display.calls == []


def test_text_input_prompt_carries_existing_value(stack, display):
    _run(stack, _click("option0"), _click("name"))

    prompt = display.of("show_text_input")[0][0]
    assert prompt.feedback_id == "name"
    assert prompt.title == "Report Issue"
    assert prompt.text == "Please enter your name"
    assert prompt.placeholder == "eg. John Smith (optional)"
    assert prompt.input_type == "SingleLine"
    assert prompt.input_text is None

    _run(stack, TextSubmitted(feedback_id="name", text="Ada"), _click("name"))
    assert display.of("show_text_input")[-1][0].input_text == "Ada"


def test_text_submission_stores_value_and_rerenders(stack, display):
    _run(stack, _click("option0"))
    display.calls.clear()

    _run(stack, TextSubmitted(feedback_id="name", text="Ada Lovelace"))

    assert stack.session.get("name") == "Ada Lovelace"
    assert display.names()[0] == "save_panel"
    assert stack.renderer.last_document.find("name-text").name == "Name: Ada Lovelace"


def test_text_for_unknown_field_is_ignored(stack, display):
    _run(stack, TextSubmitted(feedback_id="bogus", text="x"))

    assert "bogus" not in stack.session.values
    assert display.calls == []


def test_text_for_non_modifiable_field_is_ignored():
    schema = FormSchema.from_config(
        {
            "start": {"options": ["Audio"]},
            "form": {"room": {"modifiable": False, "placeholder": "Room 4", "type": {"Text": {}}}},
        }
    )
    display = FakeDisplay()
    stack = build_stack(schema, display, FakeStatus(), FakeTransport())
    _run(stack, TextSubmitted(feedback_id="room", text="Room 9"))

    assert stack.session.get("room") == "Room 4"
    assert display.calls == []


def test_change_category_returns_to_start(stack):
    _run(stack, _click("option0"), TextSubmitted(feedback_id="name", text="Ada"), _click("category"))

    assert stack.session.values == {}
    assert stack.session.mode is FormMode.START


def test_submit_closes_panel_and_posts(stack, display, transport):
    _run(stack, _click("option3"), TextSubmitted(feedback_id="name", text="Ada"), _click("submit"))

    assert "close_panel" in display.names()
    assert len(transport.posts) == 1
    body = transport.posts[0]["body"]
    assert body["category"] == "Request for a technician"
    assert body["name"] == "Ada"
    assert stack.router.last_submission.ok is True
    # Values survive a submission; only a fresh panel open clears them.
    assert stack.session.get("name") == "Ada"


def test_submission_can_be_detached(display, status, transport, schema):
    spawned = []
    stack = build_stack(schema, display, status, transport, spawn=lambda func, *args: spawned.append((func, args)))
    _run(stack, _click("option0"), _click("submit"), PanelOpened(panel_id="feedback"))

    assert transport.posts == []
    assert len(spawned) == 1
    assert stack.session.values == {}

    func, args = spawned[0]
    asyncio.run(func(*args))
    assert len(transport.posts) == 1
    # The values captured at the click are sent, not the reset session.
    assert transport.posts[0]["body"]["category"] == "Technical Issue with Incoming Audio/Video"


def test_non_modifiable_text_input_field_is_never_prompted():
    schema = FormSchema.from_config(
        {
            "start": {"options": ["Audio"]},
            "form": {
                "room": {
                    "modifiable": False,
                    "placeholder": "Room 4",
                    "action": "TextInput",
                    "type": {"Text": {"prefix": "Room:"}, "Button": {"name": ["Set room", "Change room"]}},
                },
            },
        }
    )
    display = FakeDisplay()
    stack = build_stack(schema, display, FakeStatus(), FakeTransport())
    assert stack.renderer.resolver.is_eligible("room") is True

    _run(stack, _click("room"))

    assert display.of("show_text_input") == []
    assert stack.session.get("room") == "Room 4"
