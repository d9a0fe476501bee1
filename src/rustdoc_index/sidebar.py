"""
Structured view of sidebar payloads.

A sidebar payload maps an item kind to the items of one module:

    {"fn": [["load", "Create a new image from a Reader"], ...], "mod": [...]}

Later rustdoc versions drop the description and emit bare names.
"""

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup

from rustdoc_index.payload import IndexPayload, IndexValue


# Order in which rustdoc lists item kinds in the sidebar
KIND_ORDER = [
    "mod",
    "macro",
    "struct",
    "enum",
    "union",
    "primitive",
    "trait",
    "traitalias",
    "fn",
    "type",
    "opaque",
    "constant",
    "static",
    "keyword",
    "attr",
    "derive",
    "foreigntype",
    "existential",
]

KIND_LABELS = {
    "mod": "Modules",
    "macro": "Macros",
    "struct": "Structs",
    "enum": "Enums",
    "union": "Unions",
    "primitive": "Primitive Types",
    "trait": "Traits",
    "traitalias": "Trait Aliases",
    "fn": "Functions",
    "type": "Type Definitions",
    "opaque": "Opaque Types",
    "constant": "Constants",
    "static": "Statics",
    "keyword": "Keywords",
    "attr": "Attribute Macros",
    "derive": "Derive Macros",
    "foreigntype": "Foreign Types",
    "existential": "Existential Types",
}


@dataclass
class SidebarItem:
    """One item listed in a module sidebar."""
    kind: str  # e.g., "fn", "struct"
    name: str  # e.g., "load"
    description: str = ""  # Plain-text summary line
    module: str = ""  # e.g., "image::imageops"

    @property
    def path(self) -> str:
        return f"{self.module}::{self.name}" if self.module else self.name


def kind_sort_key(kind: str) -> tuple[int, str]:
    """Sort key placing known kinds in rustdoc order, unknown kinds after."""
    try:
        return (KIND_ORDER.index(kind), kind)
    except ValueError:
        return (len(KIND_ORDER), kind)


def html_to_text(fragment: str) -> str:
    """Reduce an HTML fragment to single-spaced plain text."""
    if "<" not in fragment and "&" not in fragment:
        return " ".join(fragment.split())
    soup = BeautifulSoup(fragment, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with(" ")
    text = soup.get_text().replace("\xa0", " ")
    return re.sub(r'\s+', ' ', text).strip()


def _split_value(value: IndexValue) -> tuple[str, str]:
    if isinstance(value, str):
        return value, ""
    name = value[0] if value else ""
    description = value[1] if len(value) > 1 else ""
    return name, description


def sidebar_items(payload: IndexPayload) -> list[SidebarItem]:
    """
    Expand a sidebar payload into items.

    Kinds follow rustdoc display order; items keep their generated order.
    """
    if payload.kind != "sidebar":
        raise ValueError(f"Expected a sidebar payload, got '{payload.kind}'")

    items = []
    for kind in sorted(payload.keys(), key=kind_sort_key):
        for value in payload[kind]:
            name, description = _split_value(value)
            items.append(SidebarItem(
                kind=kind,
                name=name,
                description=html_to_text(description),
                module=payload.subject,
            ))
    return items


def item_href(item: SidebarItem) -> str:
    """
    Relative URL of an item page in a rustdoc tree.

    mod    -> <module dirs>/<name>/index.html
    others -> <module dirs>/<kind>.<name>.html
    """
    prefix = "/".join(item.module.split("::")) + "/" if item.module else ""
    if item.kind == "mod":
        return f"{prefix}{item.name}/index.html"
    return f"{prefix}{item.kind}.{item.name}.html"
