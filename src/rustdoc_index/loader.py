"""
Parse generated rustdoc index files and hand their payloads to a sink.

Supported layouts:

    sidebar-items.js (rustdoc <= 1.67)
        initSidebarItems({"fn":[["load","Create a new image from a Reader"]],...});

    sidebar-items.js (later rustdoc)
        window.SIDEBAR_ITEMS = {"fn":["load",...],...};

    implementors/<path>/trait.<Name>.js (per-crate assignments)
        (function() {var implementors = {};
        implementors["num_bigint"] = ["impl ... for ...",];
        ...
        if (window.register_implementors) { ... } else { ... }
        })()

    implementors/<path>/trait.<Name>.js (object literal)
        (function() {var implementors = {"num_bigint":["impl ... for ..."]}; ...})()

Files are parsed, never evaluated. The conditional handoff at the end of each
file is reproduced by load_index_file() through a DeferredRegistrationSink.
"""

import json
import re
from collections.abc import Iterator, Mapping
from pathlib import Path

from rustdoc_index.payload import IndexPayload, PayloadError
from rustdoc_index.registry import DeferredRegistrationSink, get_sink


SIDEBAR_FILENAME = "sidebar-items.js"
IMPLEMENTORS_DIRNAME = "implementors"

SIDEBAR_CALL_PATTERN = re.compile(r'initSidebarItems\s*\(\s*(?=\{)')
SIDEBAR_ASSIGN_PATTERN = re.compile(r'SIDEBAR_ITEMS\s*=\s*(?=\{)')
IMPLEMENTORS_ASSIGN_PATTERN = re.compile(
    r'^\s*implementors\[(?P<key>"(?:[^"\\]|\\.)*")\]\s*=\s*(?P<body>\[.*\])\s*;?\s*$',
    re.MULTILINE,
)
IMPLEMENTORS_OBJECT_PATTERN = re.compile(r'var\s+implementors\s*=\s*(?=\{)')
# String literals are matched first so commas inside them are left alone
TRAILING_COMMA_PATTERN = re.compile(r'("(?:[^"\\]|\\.)*")|,\s*([\]}])')


class IndexFormatError(ValueError):
    """Raised when a file does not look like a generated rustdoc index."""

    def __init__(self, message: str, source: str = ""):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


def detect_kind(text: str, source: str = "") -> str:
    """Return "sidebar" or "implementors" for a generated index file."""
    if SIDEBAR_CALL_PATTERN.search(text) or SIDEBAR_ASSIGN_PATTERN.search(text):
        return "sidebar"
    if IMPLEMENTORS_OBJECT_PATTERN.search(text) or IMPLEMENTORS_ASSIGN_PATTERN.search(text):
        return "implementors"
    raise IndexFormatError(
        "not a rustdoc index file (no initSidebarItems call or implementors table)",
        source,
    )


def strip_trailing_commas(literal: str) -> str:
    """Remove commas before a closing bracket, outside string literals."""
    return TRAILING_COMMA_PATTERN.sub(lambda m: m.group(1) or m.group(2), literal)


def _decode_object_at(text: str, pos: int, source: str) -> dict:
    """Decode the JSON object literal starting at text[pos]."""
    decoder = json.JSONDecoder()
    try:
        value, _ = decoder.raw_decode(text, pos)
    except json.JSONDecodeError:
        # Generated literals may carry trailing commas, which JSON rejects
        end = text.rfind("}")
        cleaned = strip_trailing_commas(text[pos:end + 1])
        try:
            value, _ = decoder.raw_decode(cleaned)
        except json.JSONDecodeError as e:
            raise IndexFormatError(f"invalid object literal: {e}", source) from e
    if not isinstance(value, dict):
        raise IndexFormatError("expected an object literal", source)
    return value


def _build_payload(mapping, kind: str, subject: str, source: str) -> IndexPayload:
    try:
        return IndexPayload.from_mapping(mapping, kind=kind, subject=subject, source=source)
    except PayloadError as e:
        raise IndexFormatError(str(e), source) from e


def parse_sidebar_items(text: str, subject: str = "", source: str = "") -> IndexPayload:
    """Parse a sidebar-items.js file into a payload."""
    match = SIDEBAR_CALL_PATTERN.search(text) or SIDEBAR_ASSIGN_PATTERN.search(text)
    if not match:
        raise IndexFormatError("no initSidebarItems() call found", source)

    mapping = _decode_object_at(text, match.end(), source)
    return _build_payload(mapping, "sidebar", subject, source)


def parse_implementors(text: str, subject: str = "", source: str = "") -> IndexPayload:
    """
    Parse an implementors/**/trait.*.js file into a payload.

    Per-crate assignments win over the initial object literal; a crate
    assigned twice keeps its last assignment, as the script would.
    """
    mapping: dict[str, list] = {}

    object_match = IMPLEMENTORS_OBJECT_PATTERN.search(text)
    if object_match:
        mapping.update(_decode_object_at(text, object_match.end(), source))

    assignments = list(IMPLEMENTORS_ASSIGN_PATTERN.finditer(text))
    for match in assignments:
        try:
            key = json.loads(match.group("key"))
            body = strip_trailing_commas(match.group("body"))
            values = json.loads(body)
        except json.JSONDecodeError as e:
            line = text.count("\n", 0, match.start()) + 1
            raise IndexFormatError(f"line {line}: invalid implementors assignment: {e}", source) from e
        mapping.pop(key, None)
        mapping[key] = values

    if not object_match and not assignments:
        raise IndexFormatError("no implementors table found", source)

    return _build_payload(mapping, "implementors", subject, source)


def parse_index_text(text: str, subject: str = "", source: str = "") -> IndexPayload:
    """Parse the text of any supported index file."""
    kind = detect_kind(text, source)
    if kind == "sidebar":
        return parse_sidebar_items(text, subject=subject, source=source)
    return parse_implementors(text, subject=subject, source=source)


# =============================================================================
# Files
# =============================================================================

def subject_from_path(path: Path, doc_root: Path | None = None) -> str:
    """
    Derive the payload subject from an index file location.

    image/imageops/sidebar-items.js        -> "image::imageops"
    implementors/core/str/trait.FromStr.js -> "core::str::FromStr"
    """
    path = Path(path)
    if doc_root is not None:
        try:
            parts = path.resolve().relative_to(Path(doc_root).resolve()).parts
        except ValueError:
            parts = path.parts
    else:
        parts = path.parts

    if IMPLEMENTORS_DIRNAME in parts[:-1]:
        start = len(parts) - 1 - parts[::-1].index(IMPLEMENTORS_DIRNAME)
        stem = path.name[:-len(".js")] if path.name.endswith(".js") else path.name
        _, _, trait_name = stem.rpartition(".")
        return "::".join([*parts[start + 1:-1], trait_name])

    if doc_root is not None:
        return "::".join(parts[:-1])
    return path.parent.name


def parse_index_file(path: Path, doc_root: Path | None = None) -> IndexPayload:
    """Read and parse a generated index file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise IndexFormatError(f"cannot read file: {e}", str(path)) from e
    except UnicodeDecodeError as e:
        raise IndexFormatError(f"not valid UTF-8: {e}", str(path)) from e
    return parse_index_text(text, subject=subject_from_path(path, doc_root), source=str(path))


def load_index_file(
    path: Path,
    doc_root: Path | None = None,
    sinks: Mapping[str, DeferredRegistrationSink] | None = None,
) -> IndexPayload:
    """
    Parse a generated index file and perform its registration handoff.

    The payload goes to the sink for its kind in `sinks`, or to the
    process-wide sink for its kind.
    """
    payload = parse_index_file(path, doc_root)
    sink = sinks[payload.kind] if sinks is not None else get_sink(payload.kind)
    sink.register(payload)
    return payload


def iter_index_files(doc_root: Path) -> Iterator[Path]:
    """
    Iterate over the index files of a rustdoc output directory.

    Yields every sidebar-items.js, then every implementors/**/*.js, each
    group in sorted order.
    """
    doc_root = Path(doc_root)
    implementors_dir = doc_root / IMPLEMENTORS_DIRNAME

    for path in sorted(doc_root.rglob(SIDEBAR_FILENAME)):
        if implementors_dir in path.parents:
            continue
        yield path

    if implementors_dir.is_dir():
        yield from sorted(implementors_dir.rglob("*.js"))
