#!/usr/bin/env python3
"""
extract-rustdoc-index: Extract rustdoc sidebar and implementor indexes to JSON.

Loads every sidebar-items.js and implementors/**/*.js file of a rustdoc
output directory, registers each payload with a DocIndex consumer, and
writes the result as a single JSON index.

Usage:
    uv run extract-rustdoc-index --doc-dir target/doc
    uv run extract-rustdoc-index --doc-dir target/doc --output index/image.json
    uv run extract-rustdoc-index --doc-dir target/doc --force

Output:
    index/index.json (default)
"""

import argparse
import sys

from rustdoc_index.collection import load_doc_tree
from rustdoc_index.loader import IndexFormatError, iter_index_files
from rustdoc_index.shared import (
    get_default_index_path,
    get_project_root,
    resolve_path,
    save_json,
    validate_doc_index,
    validate_path_in_project,
    PathOutsideProjectError,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Extract rustdoc sidebar and implementor indexes to JSON"
    )
    parser.add_argument(
        "--doc-dir", "-d",
        type=str,
        required=True,
        help="rustdoc output directory (e.g., target/doc)",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output JSON path (default: index/index.json)",
    )
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Overwrite the output if it exists",
    )
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip schema validation of the output",
    )

    args = parser.parse_args(argv)
    root = get_project_root()

    doc_dir = resolve_path(args.doc_dir, root)
    if not doc_dir.is_dir():
        print(f"ERROR: rustdoc output not found at {doc_dir}", file=sys.stderr)
        print("Run: cargo doc", file=sys.stderr)
        return 1

    if args.output:
        try:
            output_path = validate_path_in_project(resolve_path(args.output, root), root)
        except PathOutsideProjectError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
    else:
        output_path = get_default_index_path(root)

    if output_path.exists() and not args.force:
        print(f"Output exists: {output_path}")
        print("Use --force to re-extract")
        return 0

    files = list(iter_index_files(doc_dir))
    if not files:
        print(f"ERROR: no sidebar-items.js or implementors files under {doc_dir}", file=sys.stderr)
        return 1

    print(f"Scanning {doc_dir}...")
    print(f"  Found {len(files)} index file(s)")

    try:
        index = load_doc_tree(doc_dir)
    except IndexFormatError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    data = index.to_dict(doc_root=str(doc_dir))

    if not args.no_validate:
        errors = validate_doc_index(data)
        if errors:
            print("ERROR: extracted index does not match schema:", file=sys.stderr)
            for error in errors:
                print(f"  {error}", file=sys.stderr)
            return 1

    save_json(output_path, data)
    print(f"\nSaved: {output_path}")

    summary = data["summary"]
    print(f"\n{'='*60}")
    print("EXTRACTION COMPLETE")
    print(f"{'='*60}")
    print(f"Modules:      {summary['modules']}")
    print(f"Items:        {summary['items']}")
    print(f"Traits:       {summary['traits']}")
    print(f"Crates:       {summary['crates']}")
    print(f"Implementors: {summary['implementors']}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
