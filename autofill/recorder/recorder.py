"""
Passive answer recorder
-----------------------

Watches what the user types and turns it into Observations, but only once
the form it belongs to is actually submitted:

    blur / change            -> capture into a per-form pending buffer
    submit / submit-ish click -> commit that form's buffer (emit Observations)
    beforeunload             -> discard everything still pending

Pending entries are keyed by field locator inside their form, so editing a
field twice keeps one entry (last write wins). Nothing pending survives the
Recorder object.
"""

import asyncio
import inspect
import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from autofill.classifier.registry import classify as default_classify
from autofill.config import COMMIT_SETTLE_SECONDS
from autofill.dom import closest, field_locator, field_value, is_form_field, is_tag, text_content
from autofill.recorder.events import Event, Page
from autofill.recorder.keys import (
    create_observation,
    create_question_key,
    form_id_for,
    generate_id,
    now_ms,
    site_key,
)
from autofill.scanner.fields import extract_field_context
from autofill.types import FieldContext, Observation, PendingObservation, QuestionKey

logger = logging.getLogger(__name__)

SUBMIT_TEXT_RE = re.compile(r"submit|next|continue|save|apply|提交|保存|下一步|继续", re.I)
CHANGE_CAPTURE_TYPES = ("checkbox", "radio")

ObservationCallback = Callable[[Observation, str, QuestionKey], None]
CommitCallback = Callable[[int, str], None]


def _is_button_like(tag) -> bool:
    if tag.name in ("button", "a"):
        return True
    if (tag.get("role") or "").lower() == "button":
        return True
    return tag.name == "input" and (tag.get("type") or "").lower() in ("submit", "button")


def submit_button_for(element):
    """The button-like element `element` belongs to, if it looks like a submit/next action."""
    if not is_tag(element):
        return None
    button = closest(element, _is_button_like)
    if button is None:
        return None
    if (button.get("type") or "").lower() == "submit":
        return button
    text = button.get("value") if button.name == "input" else text_content(button)
    text = " ".join(p for p in (text, button.get("aria-label")) if p)
    return button if SUBMIT_TEXT_RE.search(text) else None


class Recorder:
    def __init__(
        self,
        page: Page,
        classify: Optional[Callable] = None,
        settle_delay: float = COMMIT_SETTLE_SECONDS,
    ):
        self.page = page
        self._classify = classify or default_classify
        self.settle_delay = settle_delay
        self._recording = False
        self._observation_callbacks: List[ObservationCallback] = []
        self._commit_callbacks: List[CommitCallback] = []
        # id(element) -> (element, value); the element is kept so the id stays valid
        self._last_values: Dict[int, Tuple[object, str]] = {}
        # form_id -> field_locator -> (pending, context)
        self._pending: Dict[str, Dict[str, Tuple[PendingObservation, FieldContext]]] = {}
        self._listeners = [
            ("blur", self._handle_blur),
            ("change", self._handle_change),
            ("submit", self._handle_submit),
            ("click", self._handle_click),
            ("beforeunload", self._handle_beforeunload),
        ]

    @property
    def is_recording(self) -> bool:
        return self._recording

    def on_observation(self, callback: ObservationCallback) -> None:
        self._observation_callbacks.append(callback)

    def on_commit(self, callback: CommitCallback) -> None:
        self._commit_callbacks.append(callback)

    def start(self) -> None:
        if self._recording:
            return
        self._recording = True
        for event_type, handler in self._listeners:
            self.page.add_event_listener(event_type, handler, capture=True)
        logger.debug("recorder started on %s", self.page.url)

    def stop(self) -> None:
        if not self._recording:
            return
        self._recording = False
        for event_type, handler in self._listeners:
            self.page.remove_event_listener(event_type, handler, capture=True)
        self._last_values.clear()
        logger.debug("recorder stopped on %s", self.page.url)

    # --- event handlers ---------------------------------------------------

    async def _handle_blur(self, event: Event):
        if is_form_field(event.target):
            await self.capture(event.target)

    async def _handle_change(self, event: Event):
        el = event.target
        if not is_form_field(el):
            return
        if el.name == "select" or (el.name == "input" and (el.get("type") or "").lower() in CHANGE_CAPTURE_TYPES):
            await self.capture(el)

    def _handle_submit(self, event: Event):
        if is_tag(event.target) and event.target.name == "form":
            self.commit(form_id_for(event.target))

    async def _handle_click(self, event: Event):
        button = submit_button_for(event.target)
        if button is None:
            return
        form_id = form_id_for(button)
        # give client-side validation a chance to run first
        await asyncio.sleep(self.settle_delay)
        self.commit(form_id)

    def _handle_beforeunload(self, event: Event):
        self.discard_all()

    # --- capture / commit -------------------------------------------------

    async def _run_classify(self, context: FieldContext):
        result = self._classify(context)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def capture(self, element) -> Optional[PendingObservation]:
        """Record the element's current value as pending. None when nothing was recorded."""
        value = field_value(element)
        if not value or not value.strip():
            return None
        last = self._last_values.get(id(element))
        if last is not None and last[1] == value:
            return None
        self._last_values[id(element)] = (element, value)

        context = extract_field_context(element)
        candidates = await self._run_classify(context)
        best = candidates[0]
        question_key = create_question_key(context, best.type)

        form_id = form_id_for(element)
        locator = field_locator(element)
        pending = PendingObservation(
            id=generate_id(),
            timestamp=now_ms(),
            site_key=site_key(self.page.url),
            url=self.page.url,
            form_id=form_id,
            question_key_id=question_key.id,
            field_locator=locator,
            widget_signature=context.widget_signature,
            confidence=best.score,
            raw_value=value,
            classified_type=best.type,
        )
        self._pending.setdefault(form_id, {})[locator] = (pending, context)
        logger.debug("pending %s in form %s as %s", locator, form_id, best.type.value)
        return pending

    def commit(self, form_id: str) -> int:
        entries = self._pending.pop(form_id, {})
        if not entries:
            return 0

        for pending, context in entries.values():
            pending.status = "committed"
            question_key = create_question_key(context, pending.classified_type)
            observation = create_observation(
                context,
                question_key,
                answer_id=generate_id(),
                confidence=pending.confidence,
                url=pending.url,
                field_locator=pending.field_locator,
            )
            for callback in self._observation_callbacks:
                callback(observation, pending.raw_value, question_key)

        count = len(entries)
        logger.info("committed %d observation(s) for form %s", count, form_id)
        for callback in self._commit_callbacks:
            callback(count, form_id)
        return count

    def discard_all(self) -> int:
        count = 0
        for entries in self._pending.values():
            for pending, _ in entries.values():
                pending.status = "discarded"
                count += 1
        self._pending.clear()
        if count:
            logger.info("discarded %d pending observation(s)", count)
        return count

    def pending(self, form_id: Optional[str] = None) -> List[PendingObservation]:
        if form_id is not None:
            return [p for p, _ in self._pending.get(form_id, {}).values()]
        return [p for entries in self._pending.values() for p, _ in entries.values()]
