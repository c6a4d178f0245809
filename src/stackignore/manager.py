"""
Main API: is a path inside the tree excluded by its stacked ignore files?
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .constants import IGNORE_FILENAME
from .file_loader import Reader, RuleSetLoader
from .paths import PathLike, normalize_path, parent_dir, relative_to_root
from .rule_engine import ComposedMatcher, MatchResult, MatcherComposer
from .utils import get_logger, log_with_context

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileEntry:
    """One row of a directory listing"""
    name: str
    path: str
    is_directory: bool
    is_ignored: bool = False


class GitignoreManager:
    """
    Answers ignore queries for paths under one tree root.

    Rule sets and composed matchers are cached per directory for the life of
    the instance. Call reset() after ignore files change on disk.
    """

    def __init__(self,
                 root_path: PathLike,
                 ignore_filename: str = IGNORE_FILENAME,
                 default_patterns: Optional[Iterable[str]] = None,
                 reader: Optional[Reader] = None):
        """
        Initialize the ignore manager

        Args:
            root_path: Absolute root directory of the tree
            ignore_filename: Rule file name looked up in every directory
            default_patterns: Root-level patterns evaluated before any rule file
            reader: Coroutine returning file text (for non-local storage)
        """
        self.root_path = normalize_path(root_path)
        self.ignore_filename = ignore_filename
        self._loader = RuleSetLoader(ignore_filename, reader)
        self._composer = MatcherComposer(self.root_path, self._loader, default_patterns)

    def reset(self):
        """Clear cached rule sets and matchers so ignore files are re-read"""
        log_with_context(
            logger, logging.DEBUG, f"Resetting ignore caches for {self.root_path}",
            rule_sets=len(self._loader.cache),
            matchers=len(self._composer.cache),
        )
        self._loader.clear()
        self._composer.clear()

    async def is_ignored(self, path: PathLike, is_directory: bool) -> bool:
        """
        Check if an absolute path is excluded

        Args:
            path: Absolute path inside the tree
            is_directory: Whether ``path`` names a directory

        Returns:
            True if the stacked ignore rules exclude the path
        """
        resolved = await self._resolve(path, is_directory)
        if resolved is None:
            return False
        matcher, candidate = resolved
        ignored = matcher.ignores(candidate)
        logger.trace(f"Ignore check for {candidate}: {ignored}")
        return ignored

    async def explain(self, path: PathLike, is_directory: bool) -> MatchResult:
        """Same decision as is_ignored(), with the pattern that made it"""
        resolved = await self._resolve(path, is_directory)
        if resolved is None:
            return MatchResult(should_ignore=False, candidate='')
        matcher, candidate = resolved
        return matcher.check(candidate)

    async def annotate_entries(self, entries: Iterable[FileEntry],
                               parent_is_ignored: bool = False) -> List[FileEntry]:
        """
        Fill in ``is_ignored`` for a directory listing.

        Everything below an ignored directory is ignored, so with
        ``parent_is_ignored`` no rules are consulted at all.

        Returns:
            Entries sorted directories first, then by name (case-insensitive)
        """
        entries = list(entries)
        if parent_is_ignored:
            annotated = [replace(entry, is_ignored=True) for entry in entries]
        else:
            flags = await asyncio.gather(
                *(self.is_ignored(entry.path, entry.is_directory) for entry in entries)
            )
            annotated = [
                replace(entry, is_ignored=flag) for entry, flag in zip(entries, flags)
            ]
        return sorted(annotated, key=lambda e: (not e.is_directory, e.name.casefold()))

    async def get_patterns_for_directory(self, directory: PathLike) -> List[str]:
        """
        Get all anchored patterns in effect for children of ``directory``

        Returns:
            Patterns in evaluation order (later entries win)
        """
        matcher = await self._composer.matcher_for(directory)
        return list(matcher.patterns)

    def get_stats(self) -> Dict[str, Any]:
        """Cache statistics"""
        return {
            'root_path': self.root_path,
            'ignore_filename': self.ignore_filename,
            'rule_sets': self._loader.cache.get_stats(),
            'matchers': self._composer.cache.get_stats(),
        }

    async def _resolve(self, path: PathLike,
                       is_directory: bool) -> Optional[Tuple[ComposedMatcher, str]]:
        normalized = normalize_path(path)
        relative = relative_to_root(normalized, self.root_path)

        if relative == '':
            # Root itself is never ignored
            return None
        if relative is None:
            logger.debug(f"{normalized} is outside {self.root_path}, not ignored")
            return None

        # Rules in a directory apply to its children, so the parent's matcher decides
        matcher = await self._composer.matcher_for(parent_dir(normalized))
        candidate = f"{relative}/" if is_directory else relative
        return matcher, candidate
