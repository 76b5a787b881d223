import pytest

from autofill.scanner.add_buttons import (
    find_add_button_for_section,
    find_add_buttons,
    match_add_button,
)


def test_fixture_add_button_is_work_section(form_dom):
    buttons = find_add_buttons(form_dom)

    assert len(buttons) == 1
    (button,) = buttons
    assert button.element["class"] == ["add-experience"]
    assert button.section_type == "WORK"
    assert button.confidence == pytest.approx(0.6)
    assert button.context == "+ Add another"


def test_submit_button_is_not_an_add_button(dom):
    doc = dom('<button type="submit">Submit application</button>')

    assert match_add_button(doc.find("button")) is None


def test_chinese_text_and_section_keyword(dom):
    doc = dom("<button>添加学历</button>")
    hit = match_add_button(doc.find("button"))

    assert hit is not None
    assert hit.section_type == "EDUCATION"
    assert hit.confidence == pytest.approx(0.6)


def test_bare_plus_with_aria_label(dom):
    doc = dom('<div class="projects"><button aria-label="Add another project">+</button></div>')
    hit = match_add_button(doc.find("button"))

    # text pattern + aria + lone plus + section, capped
    assert hit.confidence == 1.0
    assert hit.section_type == "PROJECT"
    assert hit.context == "+"


def test_hidden_and_disabled_buttons_are_skipped(dom):
    doc = dom(
        """
        <button style="display:none">Add experience</button>
        <button disabled>Add education</button>
        <button>Add entry</button>
        """
    )
    buttons = find_add_buttons(doc)

    assert [b.context for b in buttons] == ["Add entry"]


def test_find_add_button_for_section_prefers_match_then_generic(dom):
    doc = dom(
        """
        <button>Add entry</button>
        <div id="education-block"><button>Add education</button></div>
        """
    )

    edu = find_add_button_for_section("EDUCATION", doc)
    assert edu.context == "Add education"

    # nothing tagged WORK, fall back to the untyped button
    generic = find_add_button_for_section("WORK", doc)
    assert generic.context == "Add entry"
    assert generic.section_type is None


def test_no_buttons_returns_none(dom):
    assert find_add_button_for_section("WORK", dom("<p>nothing here</p>")) is None
