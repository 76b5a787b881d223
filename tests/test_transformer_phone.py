import pytest

from autofill.transformer.phone import (
    ParsedPhone,
    PhoneTransformer,
    detect_target_format,
    parse_phone,
    split_country_code,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("+14155551234", ParsedPhone("4155551234", "1")),
        ("+1 (415) 555-1234", ParsedPhone("4155551234", "1")),
        ("0044 7911 123456", ParsedPhone("7911123456", "44")),
        ("+86 138 0013 8000", ParsedPhone("13800138000", "86")),
        ("(415) 555-1234", ParsedPhone("4155551234")),
    ],
)
def test_parse_phone(raw, expected):
    assert parse_phone(raw) == expected


@pytest.mark.parametrize("raw", ["", "12345", "+1234", "+1415555123412345", "call me"])
def test_parse_phone_rejects(raw):
    assert parse_phone(raw) is None


def test_split_prefers_known_code_lengths():
    # "1" + 10 digits is a NANP number, not "14" + 9
    assert split_country_code("14155551234") == ParsedPhone("4155551234", "1")


def test_us_placeholder(make_context):
    target = make_context(label="Phone", placeholder="(555) 555-5555")

    assert detect_target_format(target) == "us-format"
    assert PhoneTransformer().transform("+14155551234", target) == "(415) 555-1234"


def test_dashed_placeholder(make_context):
    target = make_context(label="Phone", placeholder="555-555-5555")

    assert PhoneTransformer().transform("+14155551234", target) == "415-555-1234"


def test_local_only_by_maxlength(make_context):
    target = make_context(label="Phone", maxlength="10")

    assert PhoneTransformer().transform("4155551234", target) == "4155551234"
    assert PhoneTransformer().transform("+1 415 555 1234", target) == "4155551234"


def test_country_code_field(make_context):
    t = PhoneTransformer()

    assert t.transform("+44 7911 123456", make_context(label="Country code")) == "+44"
    # no code in the source -> default
    assert t.transform("4155551234", make_context(name="dial_code")) == "+1"


def test_international_default(make_context):
    assert PhoneTransformer().transform("0044 7911 123456", make_context(label="Mobile")) == "+44 7911123456"


def test_fixture_phone_placeholder(form_dom):
    from autofill.scanner.fields import scan_fields

    phone = next(f for f in scan_fields(form_dom) if f.attr("name") == "phone")

    assert PhoneTransformer().transform("+14155551234", phone) == "(415) 555-1234"
