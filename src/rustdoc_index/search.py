#!/usr/bin/env python3
"""
search-rustdoc-index: Query an extracted rustdoc index.

Usage:
    uv run search-rustdoc-index --query load
    uv run search-rustdoc-index --query image --kind struct --top 5
    uv run search-rustdoc-index --implementors-of FromStr
    uv run search-rustdoc-index --implemented-by num_bigint::BigUint
    uv run search-rustdoc-index --query load --json

Options:
    --index PATH            Index to search (default: index/index.json)
    --query TEXT            Search item names and descriptions
    --kind KIND             Restrict --query to one item kind (fn, struct, ...)
    --implementors-of TRAIT List impls of a trait (full path or bare name)
    --implemented-by TYPE   List traits implemented by a type (full path or bare name)
    --top N                 Maximum number of results (default: 20)
    --json                  Output results as JSON
"""

import argparse
import json
import sys
from dataclasses import asdict

from rustdoc_index.collection import DocIndex
from rustdoc_index.implementors import ImplementorRecord
from rustdoc_index.payload import PayloadError
from rustdoc_index.shared import (
    get_default_index_path,
    get_project_root,
    load_json,
    resolve_path,
    validate_doc_index,
)
from rustdoc_index.sidebar import KIND_LABELS, SidebarItem, item_href


DEFAULT_TOP = 20


def item_result(item: SidebarItem) -> dict:
    result = asdict(item)
    result["path"] = item.path
    result["href"] = item_href(item)
    return result


def impl_result(record: ImplementorRecord) -> dict:
    result = asdict(record)
    result.pop("html")
    result["links"] = [list(link) for link in record.links]
    return result


def format_items(items: list[SidebarItem]) -> None:
    """Print item search results."""
    if not items:
        print("No results found.")
        return

    for i, item in enumerate(items, 1):
        label = KIND_LABELS.get(item.kind, item.kind)
        print(f"\n{i}. [{item.kind}] {item.path}")
        print(f"   Section: {label}")
        if item.description:
            print(f"   {item.description}")
        print(f"   Page: {item_href(item)}")


def format_impls(records: list[ImplementorRecord]) -> None:
    """Print implementor results."""
    if not records:
        print("No results found.")
        return

    for i, record in enumerate(records, 1):
        marker = " (negative)" if record.negative else ""
        print(f"\n{i}. {record.text}{marker}")
        print(f"   Trait: {record.trait_path}")
        print(f"   Crate: {record.crate}")
        if record.self_path:
            print(f"   Type:  {record.self_kind} {record.self_path}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Query an extracted rustdoc index"
    )
    parser.add_argument(
        "--index", "-i",
        type=str,
        default=None,
        help="Index JSON to search (default: index/index.json)",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--query", "-q",
        type=str,
        help="Search item names and descriptions",
    )
    mode.add_argument(
        "--implementors-of",
        type=str,
        metavar="TRAIT",
        help="List impls of a trait",
    )
    mode.add_argument(
        "--implemented-by",
        type=str,
        metavar="TYPE",
        help="List trait impls for a type",
    )
    parser.add_argument(
        "--kind", "-k",
        type=str,
        default=None,
        help="Restrict --query to one item kind",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=DEFAULT_TOP,
        help=f"Maximum number of results (default: {DEFAULT_TOP})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )

    args = parser.parse_args(argv)
    root = get_project_root()

    index_path = resolve_path(args.index, root) if args.index else get_default_index_path(root)
    if not index_path.exists():
        print(f"ERROR: index not found at {index_path}", file=sys.stderr)
        print("Run: uv run extract-rustdoc-index --doc-dir target/doc", file=sys.stderr)
        return 1

    try:
        data = load_json(index_path)
    except json.JSONDecodeError as e:
        print(f"ERROR: cannot load index {index_path}: {e}", file=sys.stderr)
        return 1

    errors = validate_doc_index(data)
    if errors:
        print(f"ERROR: index {index_path} does not match schema:", file=sys.stderr)
        for error in errors:
            print(f"  {error}", file=sys.stderr)
        print("Run: uv run validate-rustdoc-index", file=sys.stderr)
        return 1

    try:
        index = DocIndex.from_dict(data)
    except PayloadError as e:
        print(f"ERROR: cannot load index {index_path}: {e}", file=sys.stderr)
        return 1

    if args.query is not None:
        mode_name, query = "query", args.query
        items = index.find_items(args.query, kind=args.kind)[:args.top]
        results = [item_result(item) for item in items]
    elif args.implementors_of is not None:
        mode_name, query = "implementors_of", args.implementors_of
        records = index.implementors_of(args.implementors_of)[:args.top]
        results = [impl_result(r) for r in records]
    else:
        mode_name, query = "implemented_by", args.implemented_by
        records = index.traits_implemented_by(args.implemented_by)[:args.top]
        results = [impl_result(r) for r in records]

    if args.json:
        print(json.dumps({
            "index": str(index_path),
            "mode": mode_name,
            "query": query,
            "kind": args.kind,
            "top_n": args.top,
            "results": results,
        }, indent=2))
        return 0

    print(f"Index: {index_path}")
    print(f"Query: {query} ({mode_name.replace('_', ' ')})")
    if mode_name == "query":
        format_items(items)
    else:
        format_impls(records)

    print(f"\n{'='*60}")
    print(f"Total: {len(results)} result(s)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
