"""
Phone number conversion.

"+14155551234" / "0044 7911 123456" / "(415) 555-1234" are parsed into an
optional country code plus a national number, then rendered the way the
target wants it:

    country-only   "+1"                 (a country/dial code field)
    local-only     "4155551234"         (maxlength=10, or a "local" label)
    us-format      "(415) 555-1234"     (placeholder shaped like "(555)")
    us-dashes      "415-555-1234"       (placeholder shaped like 555-555-5555)
    international  "+1 4155551234"      (default)
"""

import re
from dataclasses import dataclass
from typing import Optional

from autofill.transformer.base import ValueTransformer, target_hints
from autofill.transformer.phone_codes import COUNTRY_CODES, FALLBACK_MIN_LENGTH
from autofill.types import FieldContext, Taxonomy

_FORMATTING = re.compile(r"[\s\-().]")
_COUNTRY_HINT = re.compile(r"country.?code|dial.?code|国家|区号")
_LOCAL_HINT = re.compile(r"local|本地")
_US_PARENS = re.compile(r"\(\d{3}\)|\(x{3}\)", re.I)
_US_DASHES = re.compile(r"\d{3}-\d{3}-\d{4}|x{3}-x{3}-x{4}", re.I)


@dataclass
class ParsedPhone:
    number: str
    country_code: Optional[str] = None


def split_country_code(digits: str) -> Optional[ParsedPhone]:
    """Split international digits (no '+') into code + national number."""
    for size in (3, 2, 1):
        code, rest = digits[:size], digits[size:]
        if len(rest) in COUNTRY_CODES.get(code, ()):
            return ParsedPhone(rest, code)
    for size in (3, 2, 1):
        code, rest = digits[:size], digits[size:]
        if code[0] != "0" and len(rest) >= FALLBACK_MIN_LENGTH[size]:
            return ParsedPhone(rest, code)
    return None


def parse_phone(value: str) -> Optional[ParsedPhone]:
    cleaned = _FORMATTING.sub("", value or "")
    if cleaned.startswith("00"):
        cleaned = "+" + cleaned[2:]

    if cleaned.startswith("+"):
        digits = cleaned[1:]
        if not digits.isdigit() or not 8 <= len(digits) <= 15:
            return None
        return split_country_code(digits)

    if cleaned.isdigit() and 10 <= len(cleaned) <= 11:
        return ParsedPhone(cleaned)
    return None


def detect_target_format(target: FieldContext) -> str:
    if _COUNTRY_HINT.search(target_hints(target)):
        return "country-only"
    if target.attr("maxlength") == "10" or _LOCAL_HINT.search(target.label_text.lower()):
        return "local-only"
    placeholder = target.attr("placeholder")
    if _US_PARENS.search(placeholder):
        return "us-format"
    if _US_DASHES.search(placeholder):
        return "us-dashes"
    return "international"


def format_phone(phone: ParsedPhone, fmt: str) -> str:
    number, code = phone.number, phone.country_code
    if fmt == "country-only":
        return f"+{code}" if code else "+1"
    if fmt == "local-only":
        return number
    if fmt == "us-format" and len(number) == 10:
        return f"({number[:3]}) {number[3:6]}-{number[6:]}"
    if fmt == "us-dashes" and len(number) == 10:
        return f"{number[:3]}-{number[3:6]}-{number[6:]}"
    if fmt == "international" and code:
        return f"+{code} {number}"
    return number


class PhoneTransformer(ValueTransformer):
    name = "PhoneTransformer"
    source_type = Taxonomy.PHONE
    target_types = (Taxonomy.PHONE, Taxonomy.COUNTRY_CODE)

    def can_transform(self, value, target):
        return parse_phone(value) is not None

    def transform(self, value, target):
        parsed = parse_phone(value)
        if parsed is None:
            return value
        return format_phone(parsed, detect_target_format(target))
