"""
Event router: the form's state machine.

Events:
  - PanelOpened   own panel -> reset session, render start mode; foreign -> ignored
  - WidgetAction  only `clicked`; field keys dispatch on the field's action,
                  `option<i>` selects a start category
  - TextSubmitted stores text for a known modifiable field, re-renders

Unknown ids are logged and ignored. Nothing here raises to the event loop.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Union

from report_issue.adapters.base import DisplaySurface
from report_issue.engine.renderer import UIRenderer, parse_option_id
from report_issue.engine.session import FormSession
from report_issue.engine.submission import SubmissionAssembler, SubmissionResult
from report_issue.schemas.events import PanelOpened, TextSubmitted, WidgetAction
from report_issue.schemas.form import FieldAction, FieldSpec
from report_issue.schemas.ui import TextInputPrompt
from report_issue.utils import best_effort

logger = logging.getLogger(__name__)

Event = Union[PanelOpened, WidgetAction, TextSubmitted]
Spawner = Callable[..., None]


class EventRouter:
    def __init__(
        self,
        session: FormSession,
        renderer: UIRenderer,
        assembler: SubmissionAssembler,
        display: DisplaySurface,
        *,
        panel_id: str,
        name: str,
        spawn: Optional[Spawner] = None,
    ) -> None:
        self.session = session
        self.renderer = renderer
        self.assembler = assembler
        self.display = display
        self.panel_id = panel_id
        self.name = name
        # When set (e.g. a task group's `start_soon`), submissions run detached
        # from the event loop; otherwise they are awaited in place.
        self.spawn = spawn
        self.last_submission: Optional[SubmissionResult] = None

    async def handle(self, event: Event) -> None:
        if isinstance(event, PanelOpened):
            await self.on_panel_opened(event)
        elif isinstance(event, WidgetAction):
            await self.on_widget_action(event)
        elif isinstance(event, TextSubmitted):
            await self.on_text_submitted(event)
        else:
            logger.warning("Unhandled event type: %s", type(event).__name__)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    async def on_panel_opened(self, event: PanelOpened) -> None:
        if event.panel_id != self.panel_id:
            return
        self.session.reset()
        await self.renderer.render_start()

    async def on_widget_action(self, event: WidgetAction) -> None:
        if event.type != "clicked":
            return
        widget_id = event.widget_id
        logger.info("%s Clicked", widget_id)

        spec = self.session.schema.get(widget_id)
        if spec is not None:
            if not self.renderer.resolver.is_eligible(widget_id):
                logger.info("Ignoring click on ineligible field [%s]", widget_id)
                return
            await self._dispatch_field(spec)
            return

        index = parse_option_id(widget_id)
        if index is not None:
            await self._select_option(index)
            return

        logger.info("Ignoring click on unknown widget [%s]", widget_id)

    async def on_text_submitted(self, event: TextSubmitted) -> None:
        spec = self.session.schema.get(event.feedback_id)
        if spec is None:
            logger.info("Ignoring text input for unknown field [%s]", event.feedback_id)
            return
        if not spec.modifiable:
            logger.info("Ignoring text input for non-modifiable field [%s]", spec.key)
            return
        if not self.validate_input(spec, event.text):
            logger.info("Rejected input for field [%s]", spec.key)
            return
        self.session.set(spec.key, event.text)
        await self.renderer.render_form()

    def validate_input(self, spec: FieldSpec, text: str) -> bool:
        """
        Validation hook. `spec.regex` is carried through the schema but input is
        accepted verbatim.
        """
        return True

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def _dispatch_field(self, spec: FieldSpec) -> None:
        if spec.action is FieldAction.TEXT_INPUT:
            await self._open_text_input(spec)
        elif spec.action is FieldAction.OPTIONS:
            self.session.reset()
            await self.renderer.render_start()
        elif spec.action is FieldAction.SUBMIT:
            await self._submit()
        else:
            logger.info("Field [%s] has no action", spec.key)

    async def _select_option(self, index: int) -> None:
        options = self.session.schema.start.options
        if index >= len(options):
            logger.info("Ignoring out-of-range option [%d]", index)
            return
        category = options[index]
        logger.info("Option [%d] selected, category [%s]", index, category)
        self.session.set(self.session.schema.category_field, category)
        await self.renderer.render_form()

    async def _open_text_input(self, spec: FieldSpec) -> None:
        if not spec.modifiable:
            logger.info("Field [%s] is not modifiable; no prompt", spec.key)
            return
        logger.info("Opening Text Input for: %s", spec.key)
        prompt = TextInputPrompt(
            feedback_id=spec.key,
            input_type=spec.input_type,
            placeholder=spec.placeholder,
            text=spec.prompt_text,
            title=self.name,
            input_text=self.session.get(spec.key),
        )
        await best_effort(self.display.show_text_input(prompt), f"text input for {spec.key}")

    async def _submit(self) -> None:
        # Values are taken at the click; later events may reset the session.
        values = self.session.snapshot()
        await best_effort(self.display.close_panel(), "close panel")
        if self.spawn is not None:
            self.spawn(self._run_submission, values)
        else:
            await self._run_submission(values)

    async def _run_submission(self, values: Dict[str, str]) -> None:
        self.last_submission = await self.assembler.submit(values)
