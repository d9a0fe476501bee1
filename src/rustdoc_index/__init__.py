"""
rustdoc index infrastructure

Reads the JavaScript index files rustdoc generates next to its HTML and
reproduces their deferred registration handoff in Python:

- sidebar-items.js: item kind -> items of one module (initSidebarItems)
- implementors/**/trait.*.js: crate -> impl headers of one trait
  (register_implementors, or the pending slot when no consumer exists yet)

Tools:
- extract-rustdoc-index: Load a rustdoc output tree into a JSON index
- fetch-rustdoc-index: Mirror index files from a hosted documentation site
- search-rustdoc-index: Query items and trait implementors
- validate-rustdoc-index: Check an extracted index against its schema
"""

from .payload import IndexEntry, IndexPayload, PayloadError
from .registry import (
    DeferredRegistrationSink,
    SinkAlreadyInstalledError,
    SIDEBAR_SINK,
    IMPLEMENTORS_SINK,
    get_sink,
    new_sinks,
    init_sidebar_items,
    register_implementors,
)
from .loader import (
    IndexFormatError,
    detect_kind,
    parse_sidebar_items,
    parse_implementors,
    parse_index_text,
    parse_index_file,
    load_index_file,
    iter_index_files,
)
from .collection import DocIndex, load_doc_tree

__all__ = [
    # payload
    "IndexEntry",
    "IndexPayload",
    "PayloadError",
    # registry
    "DeferredRegistrationSink",
    "SinkAlreadyInstalledError",
    "SIDEBAR_SINK",
    "IMPLEMENTORS_SINK",
    "get_sink",
    "new_sinks",
    "init_sidebar_items",
    "register_implementors",
    # loader
    "IndexFormatError",
    "detect_kind",
    "parse_sidebar_items",
    "parse_implementors",
    "parse_index_text",
    "parse_index_file",
    "load_index_file",
    "iter_index_files",
    # consumer
    "DocIndex",
    "load_doc_tree",
]
