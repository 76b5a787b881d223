from autofill.scanner.sections import (
    DEFAULT_SECTION,
    detect_form_sections,
    extract_section_title,
    group_fields_by_section,
)
from autofill.types import Taxonomy


# === Section titles ===
def test_legend_beats_earlier_heading(dom):
    doc = dom("<h2>Top</h2><fieldset><legend>Address</legend><input name='street'></fieldset>")

    assert extract_section_title(doc.find("input")) == "Address"


def test_nearest_heading_above_through_ancestors(dom):
    doc = dom("<h2>Education</h2><div><div><input name='s'></div></div>")

    assert extract_section_title(doc.find("input")) == "Education"


def test_last_heading_inside_previous_sibling(dom):
    doc = dom("<div><h3>Contact</h3><h3>Links</h3></div><input name='site'>")

    assert extract_section_title(doc.find("input")) == "Links"


def test_no_heading_means_empty_title(dom):
    assert extract_section_title(dom("<input name='x'>").find("input")) == ""


# === Grouping ===
def test_group_fields_by_section_keeps_order(make_context):
    a = make_context(label="First", section="Personal")
    b = make_context(label="School", section="Education")
    c = make_context(label="Last", section="Personal")
    d = make_context(label="Misc")

    groups = group_fields_by_section([a, b, c, d])

    assert list(groups) == ["Personal", "Education", DEFAULT_SECTION]
    assert groups["Personal"] == [a, c]


def test_detect_form_sections_repeating_blocks_sort_last(make_context):
    personal = make_context(label="First name", section="Personal")
    exp1 = make_context(label="Company", section="Experience 1")
    edu = make_context(label="School", section="Education")
    exp2 = make_context(label="Company", section="Experience 2")
    loose = make_context(label="Anything else?")

    sections = detect_form_sections(
        [personal, exp1, edu, exp2, loose],
        [Taxonomy.FIRST_NAME, Taxonomy.COMPANY_NAME, Taxonomy.SCHOOL, Taxonomy.COMPANY_NAME, None],
    )

    assert [s.title for s in sections] == [
        "Education",
        "Personal",
        DEFAULT_SECTION,
        "Experience 1",
        "Experience 2",
    ]
    exp_blocks = sections[-2:]
    assert all(s.is_repeating_block and s.group_type == "WORK" for s in exp_blocks)
    assert [s.block_index for s in exp_blocks] == [0, 1]
    assert sections[0].group_type == "EDUCATION"
    assert sections[1].group_type is None


def test_group_type_falls_back_to_field_types(make_context):
    company = make_context(label="Employer", section="Details")
    start = make_context(label="From", section="Details")

    (section,) = detect_form_sections([company, start], [Taxonomy.COMPANY_NAME, Taxonomy.START_DATE])

    assert section.group_type == "WORK"
    assert not section.is_repeating_block


def test_chinese_section_titles(make_context):
    f = make_context(label="学校", section="教育经历")

    (section,) = detect_form_sections([f], [None])

    assert section.group_type == "EDUCATION"
