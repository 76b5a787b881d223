"""
"Add another" button detection.

Repeating sections (work history, education) usually only render one block
until the user clicks "+ Add". The fill layer needs to know which button
opens which kind of block; this module only finds and scores them, it never
clicks.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional

from autofill.dom import is_tag, is_visible, scoped_select, text_content

BUTTON_SELECTOR = ", ".join(
    [
        "button",
        'a[role="button"]',
        '[role="button"]',
        'input[type="button"]',
        ".btn",
        '[class*="add-"]',
        '[class*="Add"]',
    ]
)

TEXT_PATTERNS = [
    re.compile(r"^add\s*(another|more|new)?\s*(entry|experience|education|work|position|job|school)?$", re.I),
    re.compile(r"^\+\s*(add|new)?", re.I),
    re.compile(r"^new\s*(entry|experience|education|work)?$", re.I),
]
TEXT_PATTERNS_CN = [re.compile(p) for p in (r"^添加", r"^新增", r"^\+\s*添加", r"^增加")]
ARIA_PATTERNS = [
    re.compile(r"add.*(another|more|entry|experience|education|work|position)", re.I),
    re.compile(r"添加"),
    re.compile(r"新增"),
]

SECTION_KEYWORDS = {
    "WORK": re.compile(r"work|experience|employment|job|position|职位|工作|经历", re.I),
    "EDUCATION": re.compile(r"education|school|university|degree|学历|教育|学校", re.I),
    "PROJECT": re.compile(r"project|项目", re.I),
}

ICON_SELECTOR = 'svg[class*="plus"], [class*="plus"], [class*="add"]'
HEADING_SELECTOR = 'h1, h2, h3, h4, h5, h6, legend, [class*="title"], [class*="header"]'
MAX_CONTEXT_DEPTH = 5


@dataclass
class DetectedAddButton:
    element: Any
    section_type: Optional[str]
    confidence: float
    context: str


def _button_text(el) -> str:
    if el.name == "input":
        return (el.get("value") or "").strip()
    return text_content(el)


def _section_from_text(text: str) -> Optional[str]:
    for section, pattern in SECTION_KEYWORDS.items():
        if pattern.search(text):
            return section
    return None


def detect_section_type(el, button_context: str) -> Optional[str]:
    found = _section_from_text(button_context)
    if found:
        return found

    node, depth = el.parent, 0
    while is_tag(node) and depth < MAX_CONTEXT_DEPTH:
        heading = node.select_one(HEADING_SELECTOR)
        if heading is not None:
            found = _section_from_text(text_content(heading))
            if found:
                return found
        hints = " ".join(node.get("class") or []) + " " + (node.get("id") or "")
        found = _section_from_text(hints)
        if found:
            return found
        node = node.parent
        depth += 1
    return None


def match_add_button(el) -> Optional[DetectedAddButton]:
    text = _button_text(el)
    aria = el.get("aria-label") or ""
    title = el.get("title") or ""

    confidence = 0.0
    context = ""

    if any(p.search(text) for p in TEXT_PATTERNS):
        confidence += 0.4
        context = text
    if any(p.search(text) for p in TEXT_PATTERNS_CN):
        confidence += 0.4
        context = text
    if any(p.search(aria) or p.search(title) for p in ARIA_PATTERNS):
        confidence += 0.3
        context = aria or title
    if el.select_one(ICON_SELECTOR) is not None:
        confidence += 0.2
    if text in ("+", "＋"):
        confidence += 0.3
        context = "+"

    if confidence == 0:
        return None

    section_type = detect_section_type(el, f"{text} {aria}")
    if section_type:
        confidence += 0.2

    return DetectedAddButton(element=el, section_type=section_type, confidence=min(confidence, 1.0), context=context)


def find_add_buttons(root) -> List[DetectedAddButton]:
    found = []
    for el in scoped_select(root, BUTTON_SELECTOR):
        if not is_visible(el) or el.has_attr("disabled"):
            continue
        hit = match_add_button(el)
        if hit is not None:
            found.append(hit)
    found.sort(key=lambda b: b.confidence, reverse=True)
    return found


def find_add_button_for_section(section_type: str, root) -> Optional[DetectedAddButton]:
    buttons = find_add_buttons(root)
    for b in buttons:
        if b.section_type == section_type:
            return b
    for b in buttons:
        if not b.section_type:
            return b
    return None
