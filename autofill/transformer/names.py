"""
Name split / merge.

CJK names are surname-first with no separator ("张三": surname 张, given 三).
Latin names are split on whitespace: first token is the first name, last
token the last name, middle names are dropped.
"""

import re
from typing import Optional

from autofill.transformer.base import ValueTransformer, has_cjk, target_hints
from autofill.types import FieldContext, Taxonomy

FULL_NAME_HINT = re.compile(r"full.?name|legal.?name|姓名|名字")
FIRST_NAME_HINT = re.compile(r"first.?name|given.?name|(?<![a-z])f_?name(?![a-z])|(?<!姓)名")
LAST_NAME_HINT = re.compile(r"last.?name|family.?name|sur.?name|(?<![a-z])l_?name(?![a-z])|姓(?!名)")


def detect_name_part(target: FieldContext) -> Taxonomy:
    """Which part of a name the target wants, re-derived from its own label/name/id."""
    hints = target_hints(target)
    if FULL_NAME_HINT.search(hints):
        return Taxonomy.FULL_NAME
    if FIRST_NAME_HINT.search(hints):
        return Taxonomy.FIRST_NAME
    if LAST_NAME_HINT.search(hints):
        return Taxonomy.LAST_NAME
    return Taxonomy.FULL_NAME


def split_name(full_name: str):
    """(first, last) for a full name."""
    name = (full_name or "").strip()
    if not name:
        return "", ""
    if has_cjk(name):
        compact = re.sub(r"\s+", "", name)
        return compact[1:], compact[:1]
    parts = name.split()
    return parts[0], (parts[-1] if len(parts) > 1 else "")


def merge_name(first: str, last: str) -> str:
    first, last = (first or "").strip(), (last or "").strip()
    if not last:
        return first
    if not first:
        return last
    if has_cjk(first) or has_cjk(last):
        return f"{last}{first}"
    return f"{first} {last}"


class NameTransformer(ValueTransformer):
    name = "NameTransformer"
    source_type = Taxonomy.FULL_NAME
    target_types = (Taxonomy.FULL_NAME, Taxonomy.FIRST_NAME, Taxonomy.LAST_NAME)

    def can_transform(self, value, target):
        return bool(value and value.strip())

    def transform(self, value, target):
        part = detect_name_part(target)
        if part is Taxonomy.FULL_NAME:
            return value
        first, last = split_name(value)
        if part is Taxonomy.FIRST_NAME:
            return first or value
        # single-token Latin name: the one token is the best last name we have
        return last or value


class NameMergeTransformer(ValueTransformer):
    """First name + a known last name -> full name. Not in the default registry."""

    name = "NameMergeTransformer"
    source_type = Taxonomy.FIRST_NAME
    target_types = (Taxonomy.FULL_NAME,)

    def __init__(self, last_name: Optional[str] = None):
        self.last_name = last_name

    def transform(self, value, target, last_name: Optional[str] = None):
        last = last_name if last_name is not None else self.last_name
        if not last:
            return value
        return merge_name(value, last)
