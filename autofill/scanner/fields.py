"""
Field discovery
---------------

scan() walks a document (or element, or shadow root) and returns one
FieldContext per independently fillable control:

- input (minus hidden/submit/button/reset/image), select, textarea,
  inputs inside a [role=combobox], [role=listbox], contenteditable regions
- recurses into every open shadow root, recording the host chain in
  shadow_path so the fill layer can find the element again
- radio buttons sharing a name collapse into one field (the group is the
  question)
- hidden / disabled / excluded-type controls are skipped but still counted
  in ScanStats so "why didn't it see my field?" is answerable
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

from autofill.dom import (
    closest,
    get_by_id,
    in_scope,
    is_tag,
    is_visible,
    scoped_descendants,
    scoped_select,
    shadow_path,
    shadow_root,
    text_content,
    tree_root,
)
from autofill.scanner.labels import infer_label
from autofill.scanner.sections import extract_section_title
from autofill.types import FieldContext, WidgetSignature

logger = logging.getLogger(__name__)

# Excluded input types are selected too so they get counted.
CANDIDATE_SELECTOR = ", ".join(
    [
        "input",
        "select",
        "textarea",
        '[role="combobox"] input',
        '[role="listbox"]',
        '[contenteditable="true"]',
    ]
)

EXCLUDED_TYPES = {"hidden", "submit", "button", "reset", "image"}
DATE_TYPES = {"date", "datetime-local", "month", "week", "time"}
RELEVANT_ATTRS = ["id", "name", "type", "autocomplete", "role", "placeholder", "required", "pattern", "maxlength", "list"]


@dataclass
class ScanStats:
    candidates: int = 0
    emitted: int = 0
    collapsed_radios: int = 0
    excluded: Counter = field(default_factory=Counter)

    def to_dict(self):
        return {
            "candidates": self.candidates,
            "emitted": self.emitted,
            "collapsedRadios": self.collapsed_radios,
            "excluded": dict(self.excluded),
        }


@dataclass
class ScanResult:
    fields: List[FieldContext] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)


def _role(el) -> str:
    return (el.get("role") or "").lower()


def _input_type(el) -> str:
    return (el.get("type") or "").lower() if el.name == "input" else ""


def _inside_combobox(el):
    return closest(el, lambda t: (t.get("role") or "").lower() == "combobox")


def exclusion_reason(el) -> Optional[str]:
    if _input_type(el) in EXCLUDED_TYPES:
        return "excluded_type"
    if not is_visible(el):
        return "hidden"
    if el.has_attr("disabled"):
        return "disabled"
    return None


def _is_owned_listbox(el) -> bool:
    """A listbox that belongs to a combobox is that combobox's popup, not its own field."""
    if _role(el) != "listbox":
        return False
    if el.parent is not None and _inside_combobox(el.parent) is not None:
        return True
    listbox_id = el.get("id")
    if not listbox_id:
        return False
    scope = tree_root(el)
    return scope.find(attrs={"aria-controls": listbox_id}) is not None


# --- widget signature ------------------------------------------------------


def detect_widget_signature(el) -> WidgetSignature:
    role = _role(el)
    kind = "text"
    plan = "nativeSetterWithEvents"

    if el.name == "select":
        kind, plan = "select", "directSet"
    elif el.name == "textarea":
        kind = "textarea"
    elif el.name == "input":
        t = _input_type(el)
        if t == "checkbox":
            kind, plan = "checkbox", "directSet"
        elif t == "radio":
            kind, plan = "radio", "directSet"
        elif t in DATE_TYPES:
            kind = "date"
    elif role == "listbox":
        kind, plan = "select", "openDropdownClickOption"
    elif (el.get("contenteditable") or "").lower() == "true":
        kind = "textarea"

    option_locator = None
    combobox = _inside_combobox(el)
    if combobox is not None or role == "combobox":
        kind = "combobox"
        container = combobox if combobox is not None else el
        has_listbox = (
            container.find(attrs={"role": "listbox"}) is not None
            or get_by_id(tree_root(el), el.get("aria-controls") or "") is not None
        )
        plan = "openDropdownClickOption" if has_listbox else "typeToSearchEnter"
        option_locator = '[role="option"]'
    elif kind == "select" and plan == "openDropdownClickOption":
        option_locator = '[role="option"]'

    return WidgetSignature(kind=kind, interaction_plan=plan, role=role or None, option_locator=option_locator)


def extract_attributes(el) -> dict:
    attrs = {}
    for name in RELEVANT_ATTRS:
        if el.has_attr(name):
            value = el.get(name)
            attrs[name] = " ".join(value) if isinstance(value, list) else (value or "")
    return attrs


# --- options ---------------------------------------------------------------


def _role_options(container) -> List[str]:
    return [text_content(o) for o in container.find_all(attrs={"role": "option"})]


def _radio_group(el) -> list:
    name = el.get("name")
    if not name:
        return [el]
    scope = closest(el, "form") or tree_root(el)
    return [
        r
        for r in scope.find_all("input", attrs={"name": name})
        if _input_type(r) == "radio" and in_scope(r, tree_root(el))
    ]


def _radio_option_text(radio) -> str:
    scope = tree_root(radio)
    if radio.get("id"):
        for label in scope.find_all("label", attrs={"for": radio["id"]}):
            text = text_content(label, skip=("input", "select", "textarea"))
            if text:
                return text
    wrapping = closest(radio.parent, "label") if radio.parent is not None else None
    if wrapping is not None:
        text = text_content(wrapping, skip=("input", "select", "textarea"))
        if text:
            return text
    return (radio.get("aria-label") or radio.get("value") or "").strip()


def extract_options(el, kind: str) -> List[str]:
    options: List[str] = []

    if el.name == "select":
        for option in el.find_all("option"):
            value = option.get("value") if option.has_attr("value") else text_content(option)
            if value:
                options.append(text_content(option))
        return options

    if kind == "combobox":
        container = _inside_combobox(el) or el
        listbox = container.find(attrs={"role": "listbox"}) or get_by_id(
            tree_root(el), el.get("aria-controls") or ""
        )
        if listbox is not None:
            options.extend(_role_options(listbox))

    elif kind == "select":
        options.extend(_role_options(el))

    elif kind == "radio":
        options.extend(t for t in (_radio_option_text(r) for r in _radio_group(el)) if t)

    if not options and el.get("list"):
        datalist = get_by_id(tree_root(el), el["list"])
        if datalist is not None:
            for option in datalist.find_all("option"):
                text = option.get("value") or text_content(option)
                if text:
                    options.append(text)

    return options


# --- context ---------------------------------------------------------------


def extract_field_context(el, frame_path: Optional[List[str]] = None) -> FieldContext:
    signature = detect_widget_signature(el)
    label_text, source = infer_label(el)
    context = FieldContext(
        element=el,
        label_text=label_text,
        section_title=extract_section_title(el),
        attributes=extract_attributes(el),
        options_text=extract_options(el, signature.kind),
        frame_path=list(frame_path or []),
        shadow_path=shadow_path(el),
        widget_signature=signature,
    )
    logger.debug("field %s kind=%s label=%r (via %s)", el.name, signature.kind, label_text, source)
    return context


def scan(root, frame_path: Optional[List[str]] = None) -> ScanResult:
    result = ScanResult()
    seen_radio_groups = set()

    def visit(node):
        for el in scoped_select(node, CANDIDATE_SELECTOR):
            if _is_owned_listbox(el):
                continue
            result.stats.candidates += 1

            reason = exclusion_reason(el)
            if reason:
                result.stats.excluded[reason] += 1
                continue

            if _input_type(el) == "radio":
                name = el.get("name")
                if name and name in seen_radio_groups:
                    result.stats.collapsed_radios += 1
                    continue
                if name:
                    seen_radio_groups.add(name)

            result.fields.append(extract_field_context(el, frame_path))

        if is_tag(node) and shadow_root(node) is not None:
            visit(shadow_root(node))
        for host in scoped_descendants(node):
            sr = shadow_root(host)
            if sr is not None:
                visit(sr)

    visit(root)
    result.stats.emitted = len(result.fields)
    logger.debug("scan: %s", result.stats.to_dict())
    return result


def scan_fields(root, frame_path: Optional[List[str]] = None) -> List[FieldContext]:
    return scan(root, frame_path).fields
