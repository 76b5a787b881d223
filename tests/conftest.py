# tests/conftest.py
import pathlib

import joblib
import pytest

from autofill.dom import parse_html
from autofill.types import FieldContext, WidgetSignature

FIXTURES = pathlib.Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(scope="session")
def form_html_path():
    p = FIXTURES / "form-test.html"
    if not p.exists():
        pytest.skip("form-test.html not found")
    return p


@pytest.fixture
def form_dom(form_html_path):
    # function scope: recorder tests mutate the tree
    return parse_html(form_html_path.read_text(encoding="utf-8"))


@pytest.fixture
def dom():
    """Parse a snippet: dom('<input name="x">')"""
    return parse_html


@pytest.fixture
def make_context():
    """Build a FieldContext without a live element, the way the HTTP service does."""

    def _make(label="", section="", kind="text", options=None, **attrs):
        return FieldContext(
            label_text=label,
            section_title=section,
            attributes={k: str(v) for k, v in attrs.items()},
            options_text=list(options or []),
            widget_signature=WidgetSignature(kind=kind),
        )

    return _make


@pytest.fixture(scope="session")
def trained_model_path(tmp_path_factory):
    """
    Tiny label model trained into a temp dir, same pipeline as
    models/train_form_model.py. Minimal, but covers the labels the tests use.
    """
    from models.train_form_model import build_pipeline

    X = [
        "first name", "given name", "last name", "family name", "surname",
        "email address", "e mail", "mobile phone", "phone number", "telephone",
        "city", "town", "university", "college", "school name",
        "gender", "gender identity", "veteran status", "protected veteran",
    ]
    y = [
        "FIRST_NAME", "FIRST_NAME", "LAST_NAME", "LAST_NAME", "LAST_NAME",
        "EMAIL", "EMAIL", "PHONE", "PHONE", "PHONE",
        "CITY", "CITY", "SCHOOL", "SCHOOL", "SCHOOL",
        "EEO_GENDER", "EEO_GENDER", "EEO_VETERAN", "EEO_VETERAN",
    ]
    pipe = build_pipeline()
    pipe.fit(X, y)
    out = tmp_path_factory.mktemp("models") / "form_model.pkl"
    joblib.dump(pipe, out)
    return out
