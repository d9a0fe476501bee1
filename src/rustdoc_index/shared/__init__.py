"""
Shared utilities for rustdoc index tools.

Modules:
- paths: Project root and default directory helpers
- io: JSON load/save helpers
- schema: Bundled JSON schemas and validation
"""

from .paths import (
    ROOT_ENV_VAR,
    get_project_root,
    get_cache_dir,
    get_fetch_cache_dir,
    get_index_dir,
    get_default_index_path,
    resolve_path,
    validate_path_in_project,
    PathOutsideProjectError,
)

from .io import (
    load_json,
    save_json,
)

from .schema import (
    PAYLOAD_SCHEMA,
    DOC_INDEX_SCHEMA,
    load_schema,
    validate_schema,
    validate_payload_mapping,
    validate_doc_index,
)

__all__ = [
    # paths
    "ROOT_ENV_VAR",
    "get_project_root",
    "get_cache_dir",
    "get_fetch_cache_dir",
    "get_index_dir",
    "get_default_index_path",
    "resolve_path",
    "validate_path_in_project",
    "PathOutsideProjectError",
    # io
    "load_json",
    "save_json",
    # schema
    "PAYLOAD_SCHEMA",
    "DOC_INDEX_SCHEMA",
    "load_schema",
    "validate_schema",
    "validate_payload_mapping",
    "validate_doc_index",
]
