"""
Project path utilities.

All tools resolve their default locations relative to a project root:

    <root>/cache/          Fetched rustdoc index files (fetch-rustdoc-index)
    <root>/index/          Extracted JSON indexes (extract-rustdoc-index)
    <root>/index/index.json  Default index consumed by search/validate

The root is taken from the RUSTDOC_INDEX_ROOT environment variable when set,
otherwise the nearest ancestor of the working directory that contains a
pyproject.toml, otherwise the working directory itself.
"""

import os
from pathlib import Path


ROOT_ENV_VAR = "RUSTDOC_INDEX_ROOT"
ROOT_MARKER = "pyproject.toml"
DEFAULT_INDEX_FILENAME = "index.json"


class PathOutsideProjectError(ValueError):
    """Raised when a user-supplied path resolves outside the project root."""


def get_project_root(start: Path | None = None) -> Path:
    """Locate the project root."""
    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        return Path(env_root).expanduser().resolve()

    current = Path(start or Path.cwd()).resolve()
    for candidate in [current, *current.parents]:
        if (candidate / ROOT_MARKER).exists():
            return candidate
    return current


def get_cache_dir(root: Path | None = None) -> Path:
    """Get the cache directory for fetched index files."""
    if root is None:
        root = get_project_root()
    return root / "cache"


def get_fetch_cache_dir(root: Path | None = None) -> Path:
    """Get the directory fetched rustdoc trees are mirrored into."""
    return get_cache_dir(root) / "rustdoc"


def get_index_dir(root: Path | None = None) -> Path:
    """Get the directory extracted JSON indexes are written to."""
    if root is None:
        root = get_project_root()
    return root / "index"


def get_default_index_path(root: Path | None = None) -> Path:
    """Get the default path of the extracted index."""
    return get_index_dir(root) / DEFAULT_INDEX_FILENAME


def resolve_path(path: str | Path, root: Path | None = None) -> Path:
    """
    Resolve a CLI-supplied path.

    Relative paths are interpreted against the project root, absolute paths
    are kept as given.
    """
    if root is None:
        root = get_project_root()
    path = Path(path).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


def validate_path_in_project(path: Path, root: Path | None = None) -> Path:
    """
    Ensure a resolved path lies inside the project root.

    Raises PathOutsideProjectError otherwise.
    """
    if root is None:
        root = get_project_root()
    resolved = Path(path).resolve()
    try:
        resolved.relative_to(root.resolve())
    except ValueError:
        raise PathOutsideProjectError(
            f"Path is outside the project root: {resolved}\n"
            f"Project root: {root}"
        ) from None
    return resolved
