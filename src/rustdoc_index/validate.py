#!/usr/bin/env python3
"""
validate-rustdoc-index: Validate an extracted index against its JSON schema.

Usage:
    uv run validate-rustdoc-index
    uv run validate-rustdoc-index --index index/image.json

Exit Codes:
    0 - Index is valid
    1 - Schema validation failed
    2 - Index missing or unreadable
"""

import argparse
import json
import sys

from rustdoc_index.shared import (
    get_default_index_path,
    get_project_root,
    load_json,
    resolve_path,
    validate_doc_index,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate an extracted rustdoc index against its JSON schema"
    )
    parser.add_argument(
        "--index", "-i",
        type=str,
        default=None,
        help="Index JSON to validate (default: index/index.json)",
    )

    args = parser.parse_args(argv)
    root = get_project_root()

    index_path = resolve_path(args.index, root) if args.index else get_default_index_path(root)
    if not index_path.exists():
        print(f"ERROR: index not found at {index_path}", file=sys.stderr)
        return 2

    try:
        data = load_json(index_path)
    except (OSError, json.JSONDecodeError) as e:
        print(f"ERROR: cannot read {index_path}: {e}", file=sys.stderr)
        return 2

    print(f"Validating {index_path}...")
    errors = validate_doc_index(data)

    if errors:
        print(f"\nFAILED: {len(errors)} schema error(s)")
        for error in errors:
            print(f"  {error}")
        return 1

    summary = data.get("summary", {})
    print(f"  OK ({summary.get('modules', len(data['modules']))} modules, "
          f"{summary.get('traits', len(data['traits']))} traits)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
