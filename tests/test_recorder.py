import asyncio

import pytest

from autofill.classifier.registry import build_default_registry
from autofill.config import DEFAULT_FORM_ID
from autofill.recorder.events import Event, EventTarget, Page
from autofill.recorder.keys import create_question_key, form_id_for, hash_options, site_key
from autofill.recorder.recorder import Recorder, submit_button_for
from autofill.types import CandidateType, Taxonomy

URL = "https://jobs.example.com/apply?id=7"


@pytest.fixture
def rules_classify():
    return build_default_registry(model_path=None).classify


@pytest.fixture
def page(form_dom):
    return Page(form_dom, url=URL)


@pytest.fixture
def recorder(page, rules_classify):
    rec = Recorder(page, classify=rules_classify, settle_delay=0)
    rec.start()
    return rec


@pytest.fixture
def seen(recorder):
    """Collects everything the recorder reports."""
    events = {"observations": [], "commits": []}
    recorder.on_observation(lambda obs, raw, qk: events["observations"].append((obs, raw, qk)))
    recorder.on_commit(lambda count, form_id: events["commits"].append((count, form_id)))
    return events


def _field(page, name):
    return page.document.find(attrs={"name": name})


def _type(page, name, value):
    el = _field(page, name)
    el["value"] = value
    asyncio.run(page.dispatch(Event("blur", el)))
    return el


def _select(page, name, option_value):
    el = _field(page, name)
    for option in el.find_all("option"):
        if option.get("value") == option_value:
            option["selected"] = ""
        elif option.has_attr("selected"):
            del option["selected"]
    asyncio.run(page.dispatch(Event("change", el)))
    return el


def _check(page, el, checked=True):
    if checked:
        el["checked"] = ""
    elif el.has_attr("checked"):
        del el["checked"]
    asyncio.run(page.dispatch(Event("change", el)))


def _submit(page):
    asyncio.run(page.dispatch(Event("submit", page.document.find("form"))))


# === Capture ===
def test_blur_records_pending_entry(page, recorder):
    _type(page, "full_name", "Ada Lovelace")
    (pending,) = recorder.pending("application")

    assert pending.raw_value == "Ada Lovelace"
    assert pending.classified_type is Taxonomy.FULL_NAME
    assert pending.field_locator == "#full_name"
    assert pending.site_key == "jobs.example.com"
    assert pending.status == "pending"
    assert pending.to_dict()["formId"] == "application"


def test_unchanged_value_is_not_recaptured(page, recorder):
    el = _type(page, "full_name", "Ada Lovelace")

    assert asyncio.run(recorder.capture(el)) is None
    assert len(recorder.pending()) == 1

    # an edit replaces the entry for that field
    _type(page, "full_name", "Ada King")
    (pending,) = recorder.pending()
    assert pending.raw_value == "Ada King"


def test_empty_value_is_ignored(page, recorder):
    _type(page, "full_name", "   ")

    assert recorder.pending() == []


def test_change_only_captures_choice_widgets(page, recorder):
    email = _field(page, "email")
    email["value"] = "ada@example.com"
    asyncio.run(page.dispatch(Event("change", email)))
    assert recorder.pending() == []

    _select(page, "degree", "ma")
    _check(page, _field(page, "consent"))

    by_locator = {p.field_locator: p for p in recorder.pending()}
    assert by_locator["#degree"].raw_value == "ma"
    assert by_locator["#degree"].classified_type is Taxonomy.DEGREE
    assert by_locator['input[name="consent"]'].raw_value == "agree"


def test_radio_group_is_one_entry(page, recorder):
    yes, no = page.document.find_all("input", attrs={"name": "work_auth"})

    _check(page, yes)
    _check(page, yes, checked=False)
    _check(page, no)

    (pending,) = recorder.pending()
    assert pending.field_locator == 'input[name="work_auth"]'
    assert pending.raw_value == "no"
    assert pending.classified_type is Taxonomy.WORK_AUTH


def test_async_classifier_is_awaited(page):
    async def classify(context):
        await asyncio.sleep(0)
        return [CandidateType(Taxonomy.CITY, 0.7, ["stub"])]

    rec = Recorder(page, classify=classify, settle_delay=0)
    rec.start()
    _type(page, "q_1234", "Lisbon")

    (pending,) = rec.pending()
    assert pending.classified_type is Taxonomy.CITY
    assert pending.confidence == 0.7


# === Commit / discard ===
def test_submit_commits_each_distinct_field_once(page, recorder, seen):
    _type(page, "full_name", "Ada Lovelace")
    _type(page, "full_name", "Ada Lovelace")
    _type(page, "email", "ada@example.com")
    _select(page, "degree", "ma")
    pending = recorder.pending()

    _submit(page)

    assert seen["commits"] == [(3, "application")]
    assert len(seen["observations"]) == 3
    assert all(p.status == "committed" for p in pending)
    assert recorder.pending() == []

    obs, raw, qk = seen["observations"][0]
    assert raw == "Ada Lovelace"
    assert qk.type is Taxonomy.FULL_NAME
    assert qk.phrases == ["full name", "full_name"]
    assert obs.question_key_id == qk.id
    assert obs.site_key == "jobs.example.com"
    assert obs.field_locator == "#full_name"

    _, _, degree_qk = seen["observations"][2]
    assert degree_qk.section_hints == ["education"]
    assert degree_qk.choice_set_hash == hash_options(["Bachelor's Degree", "Master's Degree", "Doctorate"])

    # nothing left: no callbacks, zero count
    assert recorder.commit("application") == 0
    assert seen["commits"] == [(3, "application")]


def test_beforeunload_discards_everything(page, recorder, seen):
    _type(page, "full_name", "Ada Lovelace")
    _type(page, "email", "ada@example.com")
    pending = recorder.pending()

    asyncio.run(page.dispatch(Event("beforeunload", page.document)))
    _submit(page)

    assert seen["observations"] == []
    assert seen["commits"] == []
    assert [p.status for p in pending] == ["discarded", "discarded"]


def test_submit_click_commits_after_settle(page, recorder, seen):
    _type(page, "full_name", "Ada Lovelace")
    add_button = page.document.find("button", class_="add-experience")
    asyncio.run(page.dispatch(Event("click", add_button)))
    assert seen["commits"] == []

    submit = page.document.find("button", attrs={"type": "submit"})
    asyncio.run(page.dispatch(Event("click", submit)))

    assert seen["commits"] == [(1, "application")]


def test_click_inside_next_button():
    page = Page.from_html(
        '<form name="step1"><input name="city">'
        '<button type="button"><span>Next</span></button></form>',
        url="https://apply.example.org/",
    )
    rec = Recorder(page, classify=lambda ctx: [CandidateType(Taxonomy.CITY, 0.65)], settle_delay=0)
    rec.start()
    commits = []
    rec.on_commit(lambda count, form_id: commits.append((count, form_id)))

    city = page.document.find("input")
    city["value"] = "Porto"
    asyncio.run(page.dispatch(Event("blur", city)))
    asyncio.run(page.dispatch(Event("click", page.document.find("span"))))

    assert commits == [(1, "step1")]


def test_commit_is_per_form():
    page = Page.from_html(
        '<form id="a"><input name="x"></form><form id="b"><input name="y"></form><input name="z">'
    )
    rec = Recorder(page, classify=lambda ctx: [CandidateType(Taxonomy.UNKNOWN, 0.0)])
    rec.start()
    for name in ("x", "y", "z"):
        el = page.document.find("input", attrs={"name": name})
        el["value"] = name.upper()
        asyncio.run(rec.capture(el))

    assert rec.commit("a") == 1
    assert [p.raw_value for p in rec.pending()] == ["Y", "Z"]
    assert rec.pending(DEFAULT_FORM_ID)[0].raw_value == "Z"
    assert rec.discard_all() == 2


def test_start_stop_are_idempotent(page, rules_classify):
    rec = Recorder(page, classify=rules_classify)

    rec.start()
    rec.start()
    assert rec.is_recording
    assert page.listener_count() == 5

    rec.stop()
    rec.stop()
    assert not rec.is_recording
    assert page.listener_count() == 0

    _type(page, "full_name", "Ada Lovelace")
    assert rec.pending() == []


# === Helpers ===
def test_submit_button_for(dom):
    doc = dom(
        '<button id="s">Save &amp; continue</button><a role="button" id="x">Learn more</a>'
        '<input type="submit" id="i" value="Go"><div id="d">Submit</div>'
    )

    assert submit_button_for(doc.find(id="s"))["id"] == "s"
    assert submit_button_for(doc.find(id="x")) is None
    assert submit_button_for(doc.find(id="i"))["id"] == "i"
    assert submit_button_for(doc.find(id="d")) is None


def test_keys(dom, make_context):
    assert site_key("not a url") == "unknown"
    assert site_key("https://careers.acme.io/jobs/1") == "careers.acme.io"
    assert hash_options(["Yes", "No"]) == hash_options([" no", "YES"])

    qk = create_question_key(make_context(label="Email", name="email", id="email_1"), Taxonomy.EMAIL)
    assert qk.phrases == ["email", "email_1"]
    assert qk.choice_set_hash is None

    doc = dom('<form action="/go"><input name="a"></form><form><input name="b"></form>')
    a, b = doc.find_all("input")
    assert form_id_for(a) == "/go"
    assert form_id_for(b) == DEFAULT_FORM_ID


def test_event_target_runs_capture_listeners_first():
    target = EventTarget()
    calls = []

    async def async_capture(event):
        await asyncio.sleep(0)
        calls.append("capture")

    def bubble(event):
        calls.append("bubble")
        event.prevent_default()

    target.add_event_listener("click", bubble)
    target.add_event_listener("click", async_capture, capture=True)
    target.add_event_listener("click", async_capture, capture=True)  # duplicate ignored

    event = asyncio.run(target.dispatch(Event("click")))

    assert calls == ["capture", "bubble"]
    assert event.default_prevented
    target.remove_event_listener("click", bubble)
    assert target.listener_count("click") == 1
