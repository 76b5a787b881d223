"""
Date conversion.

Accepted source shapes: YYYY-MM[-DD], MM/DD/YYYY, M/YYYY and a bare YYYY.
The target representation comes from the control itself: input type
(date / month), the live option list of a select-like widget, or a year /
month hint in its label or name. Option-based targets only ever get a value
that is one of their options, with the full month name as the last resort.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from autofill.transformer.base import ValueTransformer, pick_option, target_hints
from autofill.types import FieldContext, Taxonomy

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
MONTH_SHORT = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_ISO = re.compile(r"^(\d{4})-(\d{1,2})(?:-(\d{1,2}))?$")
_US = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_MONTH_YEAR = re.compile(r"^(\d{1,2})/(\d{4})$")
_YEAR = re.compile(r"^(\d{4})$")

_MONTH_WORD = re.compile(
    r"\b(" + "|".join(m.lower() for m in MONTH_NAMES) + r"|" + "|".join(m.lower() for m in MONTH_SHORT) + r"|sept)\b"
)
_MONTH_NUMBER = re.compile(r"^(0?[1-9]|1[0-2])\s*月?$")
_YEAR_OPTION = re.compile(r"^\d{4}$")

_YEAR_HINT = re.compile(r"year|年")
_MONTH_HINT = re.compile(r"month|月")

OPTION_KINDS = ("select", "combobox", "radio")


@dataclass
class ParsedDate:
    year: int
    month: Optional[int] = None
    day: Optional[int] = None


def parse_date(value: str) -> Optional[ParsedDate]:
    text = (value or "").strip()
    parsed = None

    m = _ISO.match(text)
    if m:
        parsed = ParsedDate(int(m.group(1)), int(m.group(2)), int(m.group(3)) if m.group(3) else None)
    elif _US.match(text):
        m = _US.match(text)
        parsed = ParsedDate(int(m.group(3)), int(m.group(1)), int(m.group(2)))
    elif _MONTH_YEAR.match(text):
        m = _MONTH_YEAR.match(text)
        parsed = ParsedDate(int(m.group(2)), int(m.group(1)))
    elif _YEAR.match(text):
        parsed = ParsedDate(int(text))

    if parsed is None:
        return None
    if parsed.month is not None and not 1 <= parsed.month <= 12:
        return None
    if parsed.day is not None and not 1 <= parsed.day <= 31:
        return None
    return parsed


def _clean_option(option: str) -> str:
    return option.strip().lower().rstrip(".")


def detect_target_format(target: FieldContext, options: List[str]) -> str:
    input_type = target.attr("type").lower()
    if input_type == "date":
        return "iso-full"
    if input_type == "month":
        return "month-input"

    if target.widget_signature.kind in OPTION_KINDS and options:
        cleaned = [_clean_option(o) for o in options if o.strip()]
        if any(_MONTH_WORD.search(o) for o in cleaned):
            return "month-name"
        years = [o for o in cleaned if _YEAR_OPTION.match(o)]
        if years and len(years) >= len(cleaned) / 2:
            return "year-only"
        months = [o for o in cleaned if _MONTH_NUMBER.match(o)]
        if months and len(months) >= len(cleaned) / 2:
            return "month-number"

    hints = target_hints(target)
    if _YEAR_HINT.search(hints):
        return "year-only"
    if _MONTH_HINT.search(hints):
        return "month-only"
    return "iso"


def _month_candidates(month: int):
    return {
        MONTH_NAMES[month - 1].lower(),
        MONTH_SHORT[month - 1].lower(),
        str(month),
        f"{month:02d}",
        f"{month}月",
        f"{month:02d}月",
    } | ({"sept"} if month == 9 else set())


def format_date(parsed: ParsedDate, fmt: str, options: List[str]) -> Optional[str]:
    """None when the source lacks a part the target needs (e.g. a year into a month select)."""
    year, month, day = parsed.year, parsed.month, parsed.day

    if fmt == "iso-full":
        return f"{year:04d}-{month or 1:02d}-{day or 1:02d}"
    if fmt == "month-input":
        return f"{year:04d}-{month or 1:02d}"
    if fmt == "year-only":
        wanted = str(year)
        return pick_option(options, lambda o: _clean_option(o) == wanted) or wanted
    if month is None:
        if fmt == "iso":
            return str(year)
        return None
    if fmt == "month-name":
        wanted = _month_candidates(month)
        return pick_option(options, lambda o: _clean_option(o) in wanted) or MONTH_NAMES[month - 1]
    if fmt == "month-number":
        wanted = _month_candidates(month)
        return pick_option(options, lambda o: _clean_option(o) in wanted) or str(month)
    if fmt == "month-only":
        return str(month)
    if day is not None:
        return f"{year:04d}-{month:02d}-{day:02d}"
    return f"{year:04d}-{month:02d}"


class DateTransformer(ValueTransformer):
    name = "DateTransformer"
    source_type = Taxonomy.GRAD_DATE
    target_types = (
        Taxonomy.GRAD_DATE,
        Taxonomy.GRAD_YEAR,
        Taxonomy.GRAD_MONTH,
        Taxonomy.START_DATE,
        Taxonomy.END_DATE,
    )

    def can_transform(self, value, target):
        return parse_date(value) is not None

    def transform(self, value, target):
        parsed = parse_date(value)
        if parsed is None:
            return value
        options = target.live_options()
        fmt = detect_target_format(target, options)
        out = format_date(parsed, fmt, options)
        return value if out is None else out
