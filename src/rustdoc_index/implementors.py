"""
Structured view of implementors payloads.

Each value of an implementors payload is the HTML header of one impl block:

    impl <a class="trait" href="..." title="trait core::str::FromStr">FromStr</a>
        for <a class="struct" href="num_bigint/struct.BigUint.html"
               title="struct num_bigint::BigUint">BigUint</a>

    impl&lt;T:&nbsp;<a class="trait" ...>FromStr</a> + ...&gt; <a class="trait" ...>FromStr</a>
        for <a class="struct" ...>Ratio</a>&lt;T&gt;

    ... <span class="where fmt-newline">where<br>&nbsp;&nbsp;S: ...</span>

The implemented trait is the last trait link outside the impl generics and
before the top-level `for`; the implementing type is everything after it,
minus the where clause.
"""

import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, NavigableString, Tag

from rustdoc_index.payload import IndexPayload
from rustdoc_index.sidebar import html_to_text


FOR_KEYWORD_PATTERN = re.compile(r'(?<![\w!])for\s+(?!<)')


@dataclass
class ImplementorRecord:
    """One `impl Trait for Type` entry of an implementors file."""
    crate: str  # Crate providing the impl, e.g., "num_bigint"
    trait_path: str  # Trait the file documents, e.g., "core::str::FromStr"
    html: str  # Raw header HTML as generated
    text: str  # Plain-text header, where clause included
    trait_name: str = ""
    self_type: str = ""  # e.g., "Ratio<T>"
    self_kind: str = ""  # e.g., "struct"
    self_path: str = ""  # e.g., "num_rational::Ratio"
    self_href: str = ""
    negative: bool = False  # impl !Trait for Type
    has_where_clause: bool = False
    links: list[tuple[str, str]] = field(default_factory=list)  # (kind, path) in order


def _link_target(anchor: Tag) -> tuple[str, str]:
    """Return (kind, path) for a rustdoc link, from its title when present."""
    title = anchor.get("title", "")
    if title and " " in title:
        kind, path = title.split(" ", 1)
        return kind, path
    classes = anchor.get("class") or []
    kind = classes[0] if classes else ""
    return kind, anchor.get_text(strip=True)


def _header_root(soup: BeautifulSoup) -> Tag:
    """Descend through single wrapper elements (code, h3) to the header nodes."""
    root = soup
    while True:
        children = [
            c for c in root.contents
            if not (isinstance(c, NavigableString) and not c.strip())
        ]
        if len(children) == 1 and isinstance(children[0], Tag) and children[0].name != "a":
            root = children[0]
            continue
        return root


def _angle_delta(text: str) -> int:
    return text.count("<") - text.count(">")


def parse_impl_html(html: str, crate: str = "", trait_path: str = "") -> ImplementorRecord:
    """Parse one impl header into an ImplementorRecord."""
    soup = BeautifulSoup(html, "html.parser")
    links = [_link_target(a) for a in soup.find_all("a")]
    text = html_to_text(html)

    record = ImplementorRecord(
        crate=crate,
        trait_path=trait_path,
        html=html,
        text=text,
        links=links,
    )

    where_clause = soup.find(class_="where")
    if where_clause is not None:
        record.has_where_clause = True
        where_clause.extract()

    depth = 0
    pending_text = ""
    trait_anchor: Tag | None = None
    after_for: list = []
    seen_for = False

    for node in _header_root(soup).contents:
        if seen_for:
            after_for.append(node)
            continue

        if isinstance(node, Tag) and node.name == "a":
            classes = node.get("class") or []
            if depth == 0 and "trait" in classes:
                trait_anchor = node
                record.negative = pending_text.rstrip().endswith("!")
            pending_text = ""
            continue

        chunk = node.get_text() if isinstance(node, Tag) else str(node)
        chunk = chunk.replace("\xa0", " ")
        if depth == 0 and trait_anchor is not None:
            match = FOR_KEYWORD_PATTERN.search(chunk)
            if match:
                seen_for = True
                remainder = chunk[match.end():]
                if remainder:
                    after_for.append(NavigableString(remainder))
                continue
        depth = max(depth + _angle_delta(chunk), 0)
        pending_text += chunk

    if trait_anchor is not None:
        record.trait_name = trait_anchor.get_text(strip=True)
    else:
        record.trait_name = trait_path.rpartition("::")[2]

    if after_for:
        self_text = "".join(
            n.get_text() if isinstance(n, Tag) else str(n) for n in after_for
        )
        record.self_type = re.sub(r'\s+', ' ', self_text.replace("\xa0", " ")).strip()

        for node in after_for:
            anchor = node if isinstance(node, Tag) and node.name == "a" else (
                node.find("a") if isinstance(node, Tag) else None
            )
            if anchor is not None:
                record.self_kind, record.self_path = _link_target(anchor)
                record.self_href = anchor.get("href", "")
                break

    return record


def implementors_of(payload: IndexPayload) -> list[ImplementorRecord]:
    """Expand an implementors payload, keeping crate order and in-crate order."""
    if payload.kind != "implementors":
        raise ValueError(f"Expected an implementors payload, got '{payload.kind}'")

    records = []
    for crate in payload.keys():
        for value in payload[crate]:
            html = value if isinstance(value, str) else value[0]
            records.append(parse_impl_html(html, crate=crate, trait_path=payload.subject))
    return records
