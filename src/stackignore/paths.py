"""
Path helpers for root-relative ignore evaluation.

All paths handled by the engine are plain strings using '/' separators, so
Windows-style input and POSIX input share one cache key per directory.
"""

from pathlib import Path
from typing import List, Optional, Union

PathLike = Union[str, Path]


def normalize_path(path: PathLike) -> str:
    """Convert separators to '/' and trim trailing slashes (except for '/')."""
    normalized = str(path).replace('\\', '/')
    if normalized == '/':
        return normalized
    return normalized.rstrip('/')


def parent_dir(path: PathLike) -> str:
    """
    Directory containing ``path``.

    A path without separators is its own parent, and a top-level entry
    ('/etc') resolves to '/'.
    """
    normalized = normalize_path(path)
    head, sep, _ = normalized.rpartition('/')
    if not sep:
        return normalized
    return head or '/'


def relative_to_root(path: PathLike, root: str) -> Optional[str]:
    """
    Path relative to ``root``.

    Returns '' for the root itself and None when the path lies outside it.
    """
    normalized = normalize_path(path)
    if normalized == root:
        return ''
    prefix = root if root.endswith('/') else f"{root}/"
    if normalized.startswith(prefix):
        return normalized[len(prefix):]
    return None


def ancestor_dirs(directory: PathLike, root: str) -> List[str]:
    """
    Directories from ``root`` down to ``directory``, both inclusive.

    A directory outside the tree degrades to just the root.
    """
    relative = relative_to_root(directory, root)
    if relative is None:
        return [root]

    dirs = [root]
    current = root
    for part in relative.split('/'):
        if not part:
            continue
        current = f"{current}{part}" if current.endswith('/') else f"{current}/{part}"
        dirs.append(current)
    return dirs
