"""
Shared data model for the field pipeline
----------------------------------------

Everything that flows between the scanner, classifier, transformer and
recorder lives here:

- Taxonomy: the closed set of things a form field can ask for
- WidgetSignature: how a control has to be driven (independent of meaning)
- FieldContext: one discovered control + everything we learned about it
- CandidateType: a scored guess at a field's Taxonomy
- QuestionKey / Observation / PendingObservation: what the recorder emits

Records that leave the process (observations) have a to_dict() that gives
the camelCase shape the extension storage already uses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Taxonomy(str, Enum):
    # Personal info
    FULL_NAME = "FULL_NAME"
    FIRST_NAME = "FIRST_NAME"
    LAST_NAME = "LAST_NAME"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    COUNTRY_CODE = "COUNTRY_CODE"
    LOCATION = "LOCATION"
    CITY = "CITY"
    LINKEDIN = "LINKEDIN"
    GITHUB = "GITHUB"
    PORTFOLIO = "PORTFOLIO"
    SUMMARY = "SUMMARY"

    # Education
    SCHOOL = "SCHOOL"
    DEGREE = "DEGREE"
    MAJOR = "MAJOR"
    GPA = "GPA"
    GRAD_DATE = "GRAD_DATE"
    GRAD_YEAR = "GRAD_YEAR"
    GRAD_MONTH = "GRAD_MONTH"

    # Work experience
    COMPANY_NAME = "COMPANY_NAME"
    JOB_TITLE = "JOB_TITLE"
    JOB_DESCRIPTION = "JOB_DESCRIPTION"
    SKILLS = "SKILLS"

    # Dates shared by work + education blocks
    START_DATE = "START_DATE"
    END_DATE = "END_DATE"

    # Work authorization
    WORK_AUTH = "WORK_AUTH"
    NEED_SPONSORSHIP = "NEED_SPONSORSHIP"

    # Sensitive
    RESUME_TEXT = "RESUME_TEXT"
    SALARY = "SALARY"
    EEO_GENDER = "EEO_GENDER"
    EEO_ETHNICITY = "EEO_ETHNICITY"
    EEO_VETERAN = "EEO_VETERAN"
    EEO_DISABILITY = "EEO_DISABILITY"
    GOV_ID = "GOV_ID"

    UNKNOWN = "UNKNOWN"


# The decision layer should never auto-fill these without asking.
SENSITIVE_TYPES = frozenset(
    {
        Taxonomy.EEO_GENDER,
        Taxonomy.EEO_ETHNICITY,
        Taxonomy.EEO_VETERAN,
        Taxonomy.EEO_DISABILITY,
        Taxonomy.GOV_ID,
        Taxonomy.SALARY,
        Taxonomy.RESUME_TEXT,
    }
)

WIDGET_KINDS = ("text", "textarea", "select", "radio", "checkbox", "date", "combobox")

INTERACTION_PLANS = (
    "directSet",
    "nativeSetterWithEvents",
    "openDropdownClickOption",
    "typeToSearchEnter",
)


@dataclass
class WidgetSignature:
    kind: str = "text"
    interaction_plan: str = "nativeSetterWithEvents"
    role: Optional[str] = None
    option_locator: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.kind, "interactionPlan": self.interaction_plan}
        if self.role:
            out["role"] = self.role
        if self.option_locator:
            out["optionLocator"] = self.option_locator
        return out


@dataclass
class FieldContext:
    """
    One fillable control as the scanner saw it.

    `element` is the live bs4 Tag (None when a context is built from a JSON
    payload by the service). Everything else is a snapshot taken at scan time
    and is treated as read-only downstream.
    """

    element: Any = None
    label_text: str = ""
    section_title: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    options_text: List[str] = field(default_factory=list)
    frame_path: List[str] = field(default_factory=list)
    shadow_path: List[str] = field(default_factory=list)
    widget_signature: WidgetSignature = field(default_factory=WidgetSignature)

    def attr(self, name: str) -> str:
        return self.attributes.get(name) or ""

    def live_options(self) -> List[str]:
        """Option texts read from the element right now (falls back to the snapshot)."""
        if self.element is None:
            return list(self.options_text)
        # late import: dom <-> scanner would otherwise be circular
        from autofill.scanner.fields import extract_options

        live = extract_options(self.element, self.widget_signature.kind)
        return live or list(self.options_text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "labelText": self.label_text,
            "sectionTitle": self.section_title,
            "attributes": dict(self.attributes),
            "optionsText": list(self.options_text),
            "framePath": list(self.frame_path),
            "shadowPath": list(self.shadow_path),
            "widgetSignature": self.widget_signature.to_dict(),
        }


@dataclass
class CandidateType:
    type: Taxonomy
    score: float
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "score": round(self.score, 3), "reasons": list(self.reasons)}


@dataclass
class QuestionKey:
    id: str
    type: Taxonomy
    phrases: List[str] = field(default_factory=list)
    section_hints: List[str] = field(default_factory=list)
    choice_set_hash: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "phrases": list(self.phrases),
            "sectionHints": list(self.section_hints),
        }
        if self.choice_set_hash:
            out["choiceSetHash"] = self.choice_set_hash
        return out


@dataclass
class Observation:
    id: str
    timestamp: int
    site_key: str
    url: str
    question_key_id: str
    answer_id: str
    widget_signature: WidgetSignature
    confidence: float
    field_locator: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "siteKey": self.site_key,
            "url": self.url,
            "questionKeyId": self.question_key_id,
            "answerId": self.answer_id,
            "widgetSignature": self.widget_signature.to_dict(),
            "confidence": self.confidence,
        }
        if self.field_locator:
            out["fieldLocator"] = self.field_locator
        return out


@dataclass
class PendingObservation:
    id: str
    timestamp: int
    site_key: str
    url: str
    form_id: str
    question_key_id: str
    field_locator: str
    widget_signature: WidgetSignature
    confidence: float
    raw_value: str
    classified_type: Taxonomy
    status: str = "pending"  # pending | committed | discarded

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "siteKey": self.site_key,
            "url": self.url,
            "formId": self.form_id,
            "questionKeyId": self.question_key_id,
            "fieldLocator": self.field_locator,
            "widgetSignature": self.widget_signature.to_dict(),
            "confidence": self.confidence,
            "rawValue": self.raw_value,
            "classifiedType": self.classified_type.value,
            "status": self.status,
        }
