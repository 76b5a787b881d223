import pytest

from autofill.scanner.labels import (
    heuristic_ancestor_label,
    humanize,
    infer_label,
    score_label_candidate,
)


def _label(dom, html, selector="input"):
    doc = dom(html)
    return infer_label(doc.select_one(selector))


# === Cascade order ===
def test_label_for_id_wins_over_aria(dom):
    text, source = _label(dom, '<label for="e">Email</label><input id="e" aria-label="Your email">')

    assert (text, source) == ("Email", "label_for")


def test_label_for_can_point_at_name(dom):
    assert _label(dom, '<label for="email">E-mail</label><input name="email">')[0] == "E-mail"


def test_aria_label_then_labelledby(dom):
    assert _label(dom, '<input aria-label="Phone">') == ("Phone", "aria_label")

    text, source = _label(
        dom,
        '<span id="a">Start</span><span id="b">date</span><input aria-labelledby="a b">',
    )
    assert (text, source) == ("Start date", "aria_labelledby")


def test_wrapping_label_strips_nested_control_text(dom):
    text, source = _label(
        dom,
        "<label>Degree <select><option>BA</option><option>MA</option></select></label>",
        selector="select",
    )

    assert (text, source) == ("Degree", "wrapping_label")


def test_sibling_label_before_control(dom):
    text, source = _label(dom, "<div><label>Company</label><input name='x1'></div>")

    assert (text, source) == ("Company", "sibling_label")


def test_placeholder_is_used_when_nothing_better(dom):
    assert _label(dom, '<input placeholder="Search">') == ("Search", "placeholder")


def test_preceding_inline_text(dom):
    text, source = _label(dom, "<div>Zip <input name='z'></div>")

    assert (text, source) == ("Zip", "inline_text")


def test_humanized_name_is_last_resort(dom):
    assert _label(dom, '<input name="firstName">') == ("first name", "name")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("firstName", "first name"),
        ("first_name", "first name"),
        ("applicant[first-name]", "applicant first name"),
        ("", ""),
    ],
)
def test_humanize(name, expected):
    assert humanize(name) == expected


# === Radios ===
def test_radio_uses_group_question_not_option_text(dom):
    doc = dom(
        """
        <fieldset>
          <legend>Do you require sponsorship?</legend>
          <input type="radio" id="s_yes" name="sponsor" value="yes"><label for="s_yes">Yes</label>
          <input type="radio" id="s_no" name="sponsor" value="no"><label for="s_no">No</label>
        </fieldset>
        """
    )
    text, source = infer_label(doc.find("input"))

    assert text == "Do you require sponsorship?"
    assert source == "radio_group"


def test_radiogroup_aria_label(dom):
    doc = dom(
        '<div role="radiogroup" aria-label="Veteran status">'
        '<label><input type="radio" name="vet" value="y"> Yes</label></div>'
    )

    assert infer_label(doc.find("input"))[0] == "Veteran status"


def test_radio_skips_its_option_label(dom):
    text, source = _label(dom, '<div><label>Yes</label><input type="radio" name="will_relocate" value="y"></div>')

    assert (text, source) == ("will relocate", "name")


def test_radio_label_for_matches_group_name_not_id(dom):
    doc = dom(
        '<label for="relocate">Willing to relocate?</label>'
        '<label for="r1">Yes</label><input type="radio" id="r1" name="relocate" value="y">'
    )

    assert infer_label(doc.find("input")) == ("Willing to relocate?", "label_for")


# === Heuristic ancestor search ===
def test_score_disqualifies_short_or_placeholder_sized_text():
    assert score_label_candidate("Name", "label", 0) == -1
    assert score_label_candidate("First name", "text", 0, placeholder_length=10) == -1
    assert score_label_candidate("First name", "text", 0, placeholder_length=9) > 0


def test_score_prefers_labels_and_questions():
    base = score_label_candidate("What is your current employer", "text", 0)

    assert score_label_candidate("What is your current employer", "label", 0) == base + 40
    assert score_label_candidate("What is your current employer?", "text", 0) > base
    assert score_label_candidate("What is your current employer", "text", 2) == base - 30


def test_score_penalizes_error_text_and_long_text():
    plain = score_label_candidate("Please describe your experience", "text", 0)
    error = score_label_candidate("Please enter your experience", "text", 0)

    assert error < plain
    assert score_label_candidate("x" * 250, "text", 0) < 0


def test_heuristic_skips_error_messages(dom):
    doc = dom(
        """
        <div class="row">
          <div class="prompt">Which languages do you speak?</div>
          <div class="error-message">This field is required and cannot be blank</div>
          <div class="control"><input name="lang"></div>
        </div>
        """
    )

    assert heuristic_ancestor_label(doc.find("input")) == "Which languages do you speak?"


def test_heuristic_prefers_label_over_distant_heading(dom):
    doc = dom(
        """
        <div>
          <h3>Additional questions for this role</h3>
          <div>
            <label>Years of professional experience</label>
            <div><input name="yrs"></div>
          </div>
        </div>
        """
    )
    text, source = infer_label(doc.find("input"))

    assert source == "ancestor_text"
    assert text == "Years of professional experience"
