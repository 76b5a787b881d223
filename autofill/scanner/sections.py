"""
Section titles + section grouping.

extract_section_title() answers "which part of the form is this control in"
(nearest fieldset legend, else the nearest heading above it). The classifier
uses it for context boosts.

detect_form_sections() groups already-scanned fields into sections and tries
to tell work-experience blocks from education blocks, including repeated
blocks like "Experience 1", "Experience 2".
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from autofill.dom import HEADING_TAGS, closest, composed_parent, is_tag, text_content
from autofill.types import FieldContext, Taxonomy

WORK_SECTION_KEYWORDS = [
    "work experience", "employment", "professional experience", "work history",
    "工作经历", "工作经验", "职业经历", "experience", "position", "职位",
]

EDUCATION_SECTION_KEYWORDS = [
    "education", "academic", "school", "university", "degree",
    "教育经历", "教育背景", "学历", "学校",
]

PROJECT_SECTION_KEYWORDS = ["project", "项目"]

WORK_FIELD_TYPES = {Taxonomy.COMPANY_NAME, Taxonomy.JOB_TITLE, Taxonomy.JOB_DESCRIPTION}

EDUCATION_FIELD_TYPES = {
    Taxonomy.SCHOOL,
    Taxonomy.DEGREE,
    Taxonomy.MAJOR,
    Taxonomy.GPA,
    Taxonomy.GRAD_DATE,
    Taxonomy.GRAD_YEAR,
    Taxonomy.GRAD_MONTH,
}

# can show up in either kind of block
SHARED_FIELD_TYPES = {Taxonomy.START_DATE, Taxonomy.END_DATE, Taxonomy.LOCATION, Taxonomy.CITY}

GROUP_ORDER = {"WORK": 0, "EDUCATION": 1, "PROJECT": 2}
DEFAULT_SECTION = "_default"


# --- section title ---------------------------------------------------------


def _last_heading_in(tag):
    if tag.name in HEADING_TAGS:
        return tag
    found = tag.find_all(HEADING_TAGS)
    return found[-1] if found else None


def find_previous_heading(el):
    """Walk up through ancestors, scanning each one's preceding siblings for a heading."""
    node = el
    while is_tag(node) and node.name not in ("body", "html"):
        for sib in node.previous_siblings:
            if not is_tag(sib) or sib.name == "template":
                continue
            heading = _last_heading_in(sib)
            if heading is not None:
                return heading
        node = composed_parent(node)
    return None


def extract_section_title(el) -> str:
    fieldset = closest(el, "fieldset")
    if fieldset is not None:
        legend = fieldset.find("legend")
        if legend is not None:
            text = text_content(legend)
            if text:
                return text
    heading = find_previous_heading(el)
    return text_content(heading) if heading is not None else ""


# --- grouping --------------------------------------------------------------


@dataclass
class FormSection:
    id: str
    title: str
    fields: List[FieldContext] = field(default_factory=list)
    is_repeating_block: bool = False
    block_index: int = 0
    group_type: Optional[str] = None  # WORK | EDUCATION | PROJECT


def group_fields_by_section(fields: Sequence[FieldContext]) -> Dict[str, List[FieldContext]]:
    groups: Dict[str, List[FieldContext]] = {}
    for f in fields:
        groups.setdefault(f.section_title or DEFAULT_SECTION, []).append(f)
    return groups


def _detect_group_type(title: str, types: Sequence[Optional[Taxonomy]]) -> Optional[str]:
    lower = title.lower()
    # work keywords win over education ones ("experience" is checked first)
    for keyword in WORK_SECTION_KEYWORDS:
        if keyword in lower:
            return "WORK"
    for keyword in EDUCATION_SECTION_KEYWORDS:
        if keyword in lower:
            return "EDUCATION"
    for keyword in PROJECT_SECTION_KEYWORDS:
        if keyword in lower:
            return "PROJECT"

    work_score = 0.0
    education_score = 0.0
    for t in types:
        if t in WORK_FIELD_TYPES:
            work_score += 2
        if t in EDUCATION_FIELD_TYPES:
            education_score += 2
        if t in SHARED_FIELD_TYPES:
            work_score += 0.5
            education_score += 0.5

    if work_score > education_score and work_score >= 2:
        return "WORK"
    if education_score > work_score and education_score >= 2:
        return "EDUCATION"
    return None


def _detect_repeating(title: str, all_titles: Sequence[str]):
    m = re.match(r"(.+?)\s*(\d+)\s*$", title)
    if not m:
        return False, 0
    base = m.group(1).strip()
    index = int(m.group(2)) - 1
    for other in all_titles:
        if other != title and other.startswith(base):
            return True, index
    return False, 0


def detect_form_sections(
    fields: Sequence[FieldContext],
    field_types: Sequence[Optional[Taxonomy]],
) -> List[FormSection]:
    """
    `field_types[i]` is the chosen Taxonomy for `fields[i]` (None if unclassified).
    Non-repeating sections come first, then by group type, then block index.
    """
    types_by_field = {id(f): t for f, t in zip(fields, field_types)}
    groups = group_fields_by_section(fields)
    titles = list(groups)

    sections: List[FormSection] = []
    for title, members in groups.items():
        group_type = _detect_group_type(title, [types_by_field.get(id(f)) for f in members])
        repeating, index = _detect_repeating(title, titles)
        sections.append(
            FormSection(
                id=f"section-{len(sections)}",
                title=title,
                fields=members,
                is_repeating_block=repeating,
                block_index=index,
                group_type=group_type,
            )
        )

    sections.sort(
        key=lambda s: (
            s.is_repeating_block,
            GROUP_ORDER.get(s.group_type, len(GROUP_ORDER)),
            s.block_index,
        )
    )
    return sections
