"""
JSON schema loading and validation.

Schemas ship inside the package (rustdoc_index/schema/):
- payload.schema.json: a single initSidebarItems()/register_implementors() mapping
- doc_index.schema.json: the index written by extract-rustdoc-index
"""

from functools import lru_cache
from pathlib import Path

import jsonschema

from .io import load_json


PAYLOAD_SCHEMA = "payload.schema.json"
DOC_INDEX_SCHEMA = "doc_index.schema.json"


def get_schema_dir() -> Path:
    """Get the directory holding the bundled schemas."""
    return Path(__file__).resolve().parent.parent / "schema"


@lru_cache(maxsize=None)
def load_schema(name: str) -> dict:
    """Load a bundled schema by file name."""
    schema_path = get_schema_dir() / name
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")
    return load_json(schema_path)


def validate_schema(data: object, schema: dict) -> list[str]:
    """
    Validate data against JSON schema.

    Returns list of error messages (empty if valid).
    """
    errors = []
    validator = jsonschema.Draft202012Validator(schema)

    for error in validator.iter_errors(data):
        path = ".".join(str(p) for p in error.absolute_path)
        if path:
            errors.append(f"{path}: {error.message}")
        else:
            errors.append(error.message)

    return errors


def validate_payload_mapping(mapping: object) -> list[str]:
    """Validate a raw payload mapping. Returns list of errors."""
    return validate_schema(mapping, load_schema(PAYLOAD_SCHEMA))


def validate_doc_index(data: object) -> list[str]:
    """Validate an extracted index. Returns list of errors."""
    return validate_schema(data, load_schema(DOC_INDEX_SCHEMA))
