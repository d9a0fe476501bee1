#!/usr/bin/env python3
"""
fetch-rustdoc-index: Download rustdoc index files from a hosted documentation site.

Mirrors sidebar-items.js and implementors/**/*.js files from a published
rustdoc tree into the local cache, keeping their relative paths so the
mirror can be fed to extract-rustdoc-index.

Usage:
    uv run fetch-rustdoc-index --base-url https://example.org/doc \
        --path image/sidebar-items.js \
        --path implementors/core/str/trait.FromStr.js
    uv run fetch-rustdoc-index --base-url https://example.org/doc \
        --path image/sidebar-items.js --output-dir cache/rustdoc/image

Output:
    cache/rustdoc/<host>/<path> (default)
"""

import argparse
import re
import sys
import time
from pathlib import Path
from urllib.parse import urlparse

import httpx

from rustdoc_index.loader import IndexFormatError, detect_kind
from rustdoc_index.shared import (
    get_fetch_cache_dir,
    get_project_root,
    resolve_path,
    validate_path_in_project,
    PathOutsideProjectError,
)


# Rate limiting
REQUEST_DELAY = 0.5  # seconds between requests
REQUEST_TIMEOUT = 30.0


def build_url(base_url: str, rel_path: str) -> str:
    """Join a documentation base URL and a path inside the tree."""
    return f"{base_url.rstrip('/')}/{rel_path.lstrip('/')}"


def default_mirror_dir(root: Path, base_url: str) -> Path:
    """Cache directory a base URL is mirrored into."""
    parsed = urlparse(base_url)
    name = re.sub(r'[^A-Za-z0-9._-]+', '_', f"{parsed.netloc}{parsed.path}").strip("_")
    return get_fetch_cache_dir(root) / (name or "docs")


def fetch_index_file(client: httpx.Client, base_url: str, rel_path: str) -> str:
    """
    Download one index file and check that it is a rustdoc index.

    Raises httpx.HTTPStatusError for non-2xx responses and IndexFormatError
    for content that is not a sidebar or implementors file.
    """
    url = build_url(base_url, rel_path)
    response = client.get(url)
    response.raise_for_status()
    text = response.text
    detect_kind(text, source=url)
    return text


def mirror_index_files(
    client: httpx.Client,
    base_url: str,
    rel_paths: list[str],
    output_dir: Path,
    delay: float = REQUEST_DELAY,
) -> tuple[list[Path], list[str]]:
    """
    Fetch each path and save it under output_dir.

    Returns (saved paths, error messages).
    """
    saved = []
    errors = []

    for i, rel_path in enumerate(rel_paths):
        if i > 0 and delay > 0:
            time.sleep(delay)

        target = (output_dir / rel_path.lstrip("/")).resolve()
        if output_dir.resolve() not in target.parents:
            errors.append(f"{rel_path}: path escapes the output directory")
            continue

        try:
            text = fetch_index_file(client, base_url, rel_path)
        except httpx.HTTPError as e:
            errors.append(f"{rel_path}: {e}")
            continue
        except IndexFormatError as e:
            errors.append(str(e))
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        saved.append(target)

    return saved, errors


def main(argv: list[str] | None = None, client: httpx.Client | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Download rustdoc index files from a hosted documentation site"
    )
    parser.add_argument(
        "--base-url", "-b",
        type=str,
        required=True,
        help="URL of the rustdoc tree root (the directory holding implementors/)",
    )
    parser.add_argument(
        "--path", "-p",
        action="append",
        required=True,
        dest="paths",
        help="Index file path relative to the base URL (repeatable)",
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default=None,
        help="Mirror directory (default: cache/rustdoc/<host>)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=REQUEST_DELAY,
        help=f"Seconds between requests (default: {REQUEST_DELAY})",
    )

    args = parser.parse_args(argv)
    root = get_project_root()

    if args.output_dir:
        try:
            output_dir = validate_path_in_project(resolve_path(args.output_dir, root), root)
        except PathOutsideProjectError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
    else:
        output_dir = default_mirror_dir(root, args.base_url)

    print(f"Fetching {len(args.paths)} file(s) from {args.base_url}...")

    owns_client = client is None
    if owns_client:
        client = httpx.Client(follow_redirects=True, timeout=REQUEST_TIMEOUT)
    try:
        saved, errors = mirror_index_files(
            client, args.base_url, args.paths, output_dir, delay=args.delay,
        )
    finally:
        if owns_client:
            client.close()

    for path in saved:
        print(f"  Saved: {path}")
    for error in errors:
        print(f"  ERROR: {error}", file=sys.stderr)

    print()
    print("-" * 40)
    print(f"Done: {len(saved)} succeeded, {len(errors)} failed")
    print(f"Mirror: {output_dir}")

    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
