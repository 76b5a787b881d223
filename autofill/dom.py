"""
Thin DOM layer over BeautifulSoup
---------------------------------

The scanner and recorder only need a handful of browser-ish capabilities:
attribute lookup, a visibility check, text extraction, id lookup inside the
right tree scope, and access to open shadow roots. This module provides
those on top of a bs4 document parsed with lxml.

Shadow DOM is modelled the way HTML serializes it (declarative shadow DOM):

    <my-widget>
      <template shadowrootmode="open"> ...shadow tree... </template>
    </my-widget>

Notes:
- bs4 Tags compare structurally with ==, so handles are always compared
  with `is` (two empty <input> tags are "equal" otherwise).
- Strings inside <template> come back as TemplateString and get_text()
  skips them, so text is collected by walking strings directly.
"""

import re
from typing import Callable, Iterable, Iterator, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

SHADOW_ROOT_ATTRS = ("shadowrootmode", "shadowroot")
CONTROL_TAGS = ("input", "select", "textarea")
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

_WS = re.compile(r"\s+")


def parse_html(html: str, parser: str = "lxml") -> BeautifulSoup:
    return BeautifulSoup(html or "", parser)


def normalize_text(text: Optional[str]) -> str:
    if not text:
        return ""
    return _WS.sub(" ", text).strip()


def is_tag(node) -> bool:
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_document(node) -> bool:
    return isinstance(node, BeautifulSoup)


# --- Shadow roots / scopes -------------------------------------------------


def is_shadow_template(tag) -> bool:
    if not is_tag(tag) or tag.name != "template":
        return False
    return any((tag.get(a) or "").lower() == "open" for a in SHADOW_ROOT_ATTRS)


def shadow_root(host) -> Optional[Tag]:
    """The open shadow root of `host`, if it has one (closed roots are unreachable)."""
    if not is_tag(host):
        return None
    for child in host.children:
        if is_shadow_template(child):
            return child
    return None


def shadow_host(root) -> Optional[Tag]:
    return root.parent if is_shadow_template(root) else None


def tree_root(el) -> Union[BeautifulSoup, Tag]:
    """Nearest enclosing scope: the shadow template this node lives in, or the document."""
    node = el.parent if el is not None else None
    last = el
    while node is not None:
        if is_tag(node) and node.name == "template":
            return node
        last = node
        node = node.parent
    return last


def in_scope(el, root) -> bool:
    """True when `el` belongs to `root`'s own tree (not a nested shadow root or inert template)."""
    node = el.parent
    while node is not None:
        if node is root:
            return True
        if is_tag(node) and node.name == "template":
            return False
        node = node.parent
    return False


def scoped_select(root, selector: str) -> List[Tag]:
    return [el for el in root.select(selector) if in_scope(el, root)]


def scoped_descendants(root) -> Iterator[Tag]:
    """Element descendants of `root`, not descending into any <template>."""
    for child in root.children:
        if not is_tag(child):
            continue
        yield child
        if child.name == "template":
            continue
        yield from scoped_descendants(child)


def get_by_id(scope, element_id: str) -> Optional[Tag]:
    if not element_id:
        return None
    for el in scope.find_all(attrs={"id": element_id}):
        if in_scope(el, scope):
            return el
    return None


def composed_parent(el) -> Optional[Tag]:
    """Parent element, stepping from the top of a shadow tree out to its host."""
    parent = el.parent
    if parent is None or is_document(parent):
        return None
    if is_shadow_template(parent):
        return parent.parent if is_tag(parent.parent) else None
    return parent


def closest(el, match: Union[str, Iterable[str], Callable[[Tag], bool]]) -> Optional[Tag]:
    """Like Element.closest(): el itself or the nearest ancestor inside the same tree."""
    if isinstance(match, str):
        names = {match}
        pred = lambda t: t.name in names  # noqa: E731
    elif callable(match):
        pred = match
    else:
        names = set(match)
        pred = lambda t: t.name in names  # noqa: E731
    node = el
    while is_tag(node):
        if node.name == "template" and node is not el:
            return None
        if pred(node):
            return node
        node = node.parent
    return None


# --- Visibility ------------------------------------------------------------


def parse_style(style: Optional[str]) -> dict:
    out = {}
    for decl in (style or "").split(";"):
        if ":" not in decl:
            continue
        prop, _, value = decl.partition(":")
        out[prop.strip().lower()] = value.replace("!important", "").strip().lower()
    return out


def is_visible(el) -> bool:
    """
    Best-effort stand-in for getComputedStyle(): inline display/visibility on
    the element or any ancestor (across shadow hosts), plus the hidden attribute.
    """
    visibility_decided = False
    node = el
    while node is not None:
        if node.has_attr("hidden"):
            return False
        style = parse_style(node.get("style"))
        if style.get("display") == "none":
            return False
        # visibility inherits, but the nearest explicit value wins
        if not visibility_decided and "visibility" in style:
            if style["visibility"] in ("hidden", "collapse"):
                return False
            visibility_decided = True
        node = composed_parent(node)
    return True


# --- Text ------------------------------------------------------------------


def _strings(el, skip: Iterable[str]) -> Iterator[str]:
    for child in el.children:
        if isinstance(child, PreformattedString):
            continue
        if isinstance(child, NavigableString):
            yield str(child)
        elif is_tag(child):
            if child.name in skip or child.name in ("script", "style", "template"):
                continue
            yield from _strings(child, skip)


def raw_text(el, skip: Iterable[str] = ()) -> str:
    return "".join(_strings(el, tuple(skip)))


def text_content(el, skip: Iterable[str] = ()) -> str:
    if el is None:
        return ""
    return normalize_text(raw_text(el, skip))


def has_element_children(el) -> bool:
    return any(is_tag(c) for c in el.children)


# --- Selectors / locators --------------------------------------------------


def element_selector(el) -> str:
    """Short selector for a host element: #id, tag.class1.class2, or tag."""
    if el.get("id"):
        return f"#{el['id']}"
    classes = el.get("class") or []
    if classes:
        return f"{el.name}." + ".".join(classes[:2])
    return el.name


def shadow_path(el) -> List[str]:
    """Selectors of the shadow hosts between the document and `el`, outermost first."""
    path: List[str] = []
    root = tree_root(el)
    while is_shadow_template(root):
        host = root.parent
        path.insert(0, element_selector(host))
        root = tree_root(host)
    return path


def _nth_of_type_path(el) -> str:
    parts = []
    node = el
    while is_tag(node) and node.name not in ("html", "body", "template"):
        index = 1
        for sib in node.previous_siblings:
            if is_tag(sib) and sib.name == node.name:
                index += 1
        parts.insert(0, f"{node.name}:nth-of-type({index})")
        node = node.parent
    return " > ".join(parts)


def field_locator(el) -> str:
    """
    Stable locator for a control. Radios in a named group share one
    locator, since the group is one question.
    """
    is_radio = el.name == "input" and (el.get("type") or "").lower() == "radio"
    if el.get("id") and not (is_radio and el.get("name")):
        local = f"#{el['id']}"
    elif el.get("name"):
        local = f'{el.name}[name="{el["name"]}"]'
    else:
        local = _nth_of_type_path(el)
    hosts = shadow_path(el)
    return " >>> ".join(hosts + [local]) if hosts else local


# --- Values ----------------------------------------------------------------


def _option_value(option) -> str:
    if option.has_attr("value"):
        return option.get("value") or ""
    return text_content(option)


def field_value(el) -> str:
    """Current value of a control, read the way the browser reports .value."""
    name = el.name
    if name == "input":
        kind = (el.get("type") or "").lower()
        if kind in ("checkbox", "radio"):
            return (el.get("value") or "true") if el.has_attr("checked") else ""
        return el.get("value") or ""
    if name == "select":
        options = el.find_all("option")
        if not options:
            return ""
        chosen = next((o for o in options if o.has_attr("selected")), options[0])
        return _option_value(chosen)
    if name == "textarea":
        return el.get("value") if el.has_attr("value") else raw_text(el)
    if (el.get("contenteditable") or "").lower() in ("", "true") and el.has_attr("contenteditable"):
        return raw_text(el).strip()
    return el.get("value") or ""


def is_form_field(el) -> bool:
    if not is_tag(el):
        return False
    if el.name in CONTROL_TAGS:
        return True
    return (el.get("contenteditable") or "").lower() == "true"
