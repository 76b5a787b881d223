"""
Label inference
---------------

Figures out the human-readable question for a control. Strategies run in a
fixed order and the first one that produces text wins:

    1. <label for=id> / <label for=name>
    2. aria-label
    3. aria-labelledby
    4. an ancestor <label> wrapping the control (nested control text stripped)
    5. a <label> sibling placed before the control
    6. heuristic ancestor-text search (scored, see score_label_candidate)
    7. placeholder
    8. nearest preceding inline text
    9. the name attribute, humanized ("firstName" -> "first name")

Radios use their own, shorter cascade. A radio's <label> holds the *option*
text ("Yes"), not the question, so for radios the wrapping label, sibling
label, placeholder and inline-text steps never run. The group's label
(radiogroup aria label or fieldset legend) takes their place, so the order
is label for=<group name> (never for=id), aria-label, aria-labelledby,
group label, ancestor text, name. See RADIO_STRATEGIES.

Nothing here ever fails: no label is a legal answer ("").
"""

import logging
import re
from typing import Callable, Iterator, List, Optional, Tuple

from autofill.config import LABEL_HEURISTICS, LabelHeuristics
from autofill.dom import (
    CONTROL_TAGS,
    HEADING_TAGS,
    closest,
    get_by_id,
    has_element_children,
    in_scope,
    is_tag,
    normalize_text,
    scoped_descendants,
    text_content,
    tree_root,
)

logger = logging.getLogger(__name__)

INLINE_TEXT_TAGS = ("span", "label", "p", "div", "strong", "b", "em", "i", "small", "font", "td", "th", "dt")
FORMATTING_TAGS = ("b", "strong", "em", "i", "u", "br", "small", "abbr", "sup", "span")
ANCESTOR_STOP_TAGS = ("form", "body", "html", "template")

ERROR_CLASS_RE = re.compile(r"error|invalid|warning|alert|validation|feedback", re.I)
ERROR_TEXT_RE = re.compile(
    r"\berror\b|\binvalid\b|is required|required field|this field is|must be|please (?:enter|select|provide|fill)"
    r"|can(?:no|')t be (?:blank|empty)|not (?:a )?valid|必填|错误|无效|不能为空",
    re.I,
)


def _is_radio(el) -> bool:
    return el.name == "input" and (el.get("type") or "").lower() == "radio"


def _label_text(label) -> str:
    return text_content(label, skip=CONTROL_TAGS)


def _contains(ancestor, el) -> bool:
    node = el.parent
    while node is not None:
        if node is ancestor:
            return True
        node = node.parent
    return False


# --- individual strategies --------------------------------------------------


def label_for(el) -> str:
    scope = tree_root(el)
    keys = [el.get("name")] if _is_radio(el) else [el.get("id"), el.get("name")]
    for key in keys:
        if not key:
            continue
        for label in scope.find_all("label", attrs={"for": key}):
            if in_scope(label, scope):
                text = _label_text(label)
                if text:
                    return text
    return ""


def aria_label(el) -> str:
    return normalize_text(el.get("aria-label"))


def aria_labelledby(el) -> str:
    ids = (el.get("aria-labelledby") or "").split()
    if not ids:
        return ""
    scope = tree_root(el)
    parts = [text_content(get_by_id(scope, i)) for i in ids]
    return normalize_text(" ".join(p for p in parts if p))


def wrapping_label(el) -> str:
    label = closest(el.parent, "label") if el.parent is not None else None
    return _label_text(label) if label is not None else ""


def sibling_label(el) -> str:
    for sib in el.previous_siblings:
        if not is_tag(sib) or sib.name != "label":
            continue
        target = sib.get("for")
        if target and target not in (el.get("id"), el.get("name")):
            continue
        text = _label_text(sib)
        if text:
            return text
    return ""


def radio_group_label(el) -> str:
    group = closest(el, lambda t: (t.get("role") or "").lower() == "radiogroup" or t.name == "fieldset")
    if group is None:
        return ""
    text = aria_label(group) or aria_labelledby(group)
    if text:
        return text
    if group.name == "fieldset":
        legend = group.find("legend")
        if legend is not None:
            return text_content(legend)
    return ""


def placeholder(el) -> str:
    return normalize_text(el.get("placeholder"))


def preceding_inline_text(el) -> str:
    for sib in el.previous_siblings:
        if is_tag(sib):
            if sib.name in CONTROL_TAGS:
                continue
            if sib.name in INLINE_TEXT_TAGS and not has_element_children(sib):
                text = text_content(sib)
                if text:
                    return text
        else:
            text = normalize_text(str(sib))
            if text:
                return text
    return ""


def humanize(name: str) -> str:
    """'firstName' / 'first_name' / 'applicant[first-name]' -> 'first name'."""
    s = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", name or "")
    s = re.sub(r"[_\-\[\]\.]+", " ", s)
    return normalize_text(s).lower()


def humanized_name(el) -> str:
    return humanize(el.get("name") or "")


# --- heuristic ancestor search ---------------------------------------------


def _candidate_kind(tag) -> Optional[str]:
    if tag.name == "label":
        return "label"
    if tag.name == "legend":
        return "legend"
    if tag.name in HEADING_TAGS:
        return "heading"
    if tag.name in INLINE_TEXT_TAGS:
        if all(not is_tag(c) or c.name in FORMATTING_TAGS for c in tag.children):
            return "text"
    return None


def _looks_like_error(tag) -> bool:
    if (tag.get("role") or "").lower() == "alert" or tag.has_attr("aria-live"):
        return True
    marker = " ".join(tag.get("class") or []) + " " + (tag.get("id") or "")
    return bool(ERROR_CLASS_RE.search(marker))


def _label_candidates(container, control) -> Iterator[Tuple[object, str]]:
    for tag in scoped_descendants(container):
        if tag is control or tag.name in CONTROL_TAGS:
            continue
        kind = _candidate_kind(tag)
        if kind is None:
            continue
        if _contains(tag, control) or tag.find(CONTROL_TAGS) is not None:
            continue
        if _looks_like_error(tag):
            continue
        yield tag, kind


def score_label_candidate(
    text: str,
    kind: str,
    distance: int,
    placeholder_length: int = 0,
    h: LabelHeuristics = LABEL_HEURISTICS,
) -> int:
    """
    Score one candidate text. -1 means disqualified.

    Placeholder text is never longer than a real question, so anything that is
    not strictly longer than the placeholder is thrown out.
    """
    length = len(text)
    if length <= placeholder_length or length < h.min_length:
        return -1
    score = max(0, 100 - abs(length - h.ideal_length))
    if length > h.max_length:
        score -= h.too_long_penalty
    score += h.type_bonus.get(kind, 0)
    score -= h.level_penalty * distance
    if "?" in text or "*" in text:
        score += h.question_bonus
    if ERROR_TEXT_RE.search(text):
        score -= h.error_penalty
    return score


def heuristic_ancestor_label(el, h: LabelHeuristics = LABEL_HEURISTICS) -> str:
    placeholder_length = len(placeholder(el))
    best_text, best_score = "", 0
    seen = set()
    node, level = el.parent, 0
    while is_tag(node) and level < h.max_levels and node.name not in ANCESTOR_STOP_TAGS:
        for tag, kind in _label_candidates(node, el):
            if id(tag) in seen:
                continue
            seen.add(id(tag))
            text = text_content(tag)
            score = score_label_candidate(text, kind, level, placeholder_length, h)
            if score > best_score:
                best_text, best_score = text, score
        node = node.parent
        level += 1
    return best_text


# --- cascade ---------------------------------------------------------------

LabelStrategy = Callable[[object], str]

LABEL_STRATEGIES: List[Tuple[str, LabelStrategy]] = [
    ("label_for", label_for),
    ("aria_label", aria_label),
    ("aria_labelledby", aria_labelledby),
    ("wrapping_label", wrapping_label),
    ("sibling_label", sibling_label),
    ("ancestor_text", heuristic_ancestor_label),
    ("placeholder", placeholder),
    ("inline_text", preceding_inline_text),
    ("name", humanized_name),
]

RADIO_STRATEGIES: List[Tuple[str, LabelStrategy]] = [
    ("label_for", label_for),
    ("aria_label", aria_label),
    ("aria_labelledby", aria_labelledby),
    ("radio_group", radio_group_label),
    ("ancestor_text", heuristic_ancestor_label),
    ("name", humanized_name),
]


def infer_label(el) -> Tuple[str, str]:
    """Return (label text, name of the strategy that produced it)."""
    strategies = RADIO_STRATEGIES if _is_radio(el) else LABEL_STRATEGIES
    for source, strategy in strategies:
        text = strategy(el)
        if text:
            return text, source
    return "", "none"


def extract_label_text(el) -> str:
    return infer_label(el)[0]
