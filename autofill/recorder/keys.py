import hashlib
import time
import uuid
from typing import Iterable, Optional
from urllib.parse import urlparse

from autofill.config import DEFAULT_FORM_ID
from autofill.dom import closest
from autofill.types import FieldContext, Observation, QuestionKey, Taxonomy


def generate_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


def site_key(url: str) -> str:
    """Hostname of `url`; 'unknown' when there is none."""
    try:
        host = urlparse(url or "").hostname
    except ValueError:
        host = None
    return host or "unknown"


def hash_options(options: Iterable[str]) -> str:
    """Order- and case-insensitive digest of a choice set."""
    normalized = sorted(o.strip().lower() for o in options)
    return hashlib.sha1("|".join(normalized).encode("utf-8")).hexdigest()[:16]


def create_question_key(context: FieldContext, taxonomy: Taxonomy) -> QuestionKey:
    phrases = []
    for raw in (context.label_text, context.attr("name"), context.attr("id"), context.attr("placeholder")):
        phrase = (raw or "").strip().lower()
        if phrase and phrase not in phrases:
            phrases.append(phrase)

    section_hints = []
    if context.section_title:
        section_hints.append(context.section_title.strip().lower())

    return QuestionKey(
        id=generate_id(),
        type=taxonomy,
        phrases=phrases,
        section_hints=section_hints,
        choice_set_hash=hash_options(context.options_text) if context.options_text else None,
    )


def create_observation(
    context: FieldContext,
    question_key: QuestionKey,
    answer_id: str,
    confidence: float,
    url: str,
    field_locator: Optional[str] = None,
) -> Observation:
    return Observation(
        id=generate_id(),
        timestamp=now_ms(),
        site_key=site_key(url),
        url=url,
        question_key_id=question_key.id,
        answer_id=answer_id,
        widget_signature=context.widget_signature,
        confidence=confidence,
        field_locator=field_locator,
    )


def form_id_for(element) -> str:
    """The enclosing form's id, name or action; DEFAULT_FORM_ID outside any form."""
    form = closest(element, "form") if element is not None else None
    if form is None:
        return DEFAULT_FORM_ID
    for attr in ("id", "name", "action"):
        value = (form.get(attr) or "").strip()
        if value:
            return value
    return DEFAULT_FORM_ID
