"""
Composition of stacked ignore files into one ordered matcher per directory
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pathspec
from pathspec.patterns.gitwildmatch import GitWildMatchPatternError
from pathspec.util import lookup_pattern

from .anchoring import anchor_pattern, names_no_path
from .cache import DirectoryCache
from .constants import PATTERN_STYLE
from .file_loader import RuleSetLoader
from .paths import PathLike, ancestor_dirs, normalize_path, relative_to_root
from .utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Result of matching a path against ignore rules"""
    should_ignore: bool
    candidate: str
    matched_pattern: Optional[str] = None
    matched_directory: Optional[str] = None  # None for default patterns


@dataclass(frozen=True)
class ComposedMatcher:
    """
    Anchored patterns visible at one directory, root rules first.

    ``patterns``, ``origins`` and ``spec.patterns`` are parallel sequences.
    """
    directory: str
    patterns: Tuple[str, ...]
    origins: Tuple[Optional[str], ...]
    spec: pathspec.PathSpec

    def __len__(self) -> int:
        return len(self.patterns)

    def ignores(self, candidate: str) -> bool:
        """
        Last matching pattern decides; negations re-include.

        A path inside an excluded directory stays excluded, the same as git:
        parent directories are checked first, top down.
        """
        for prefix in _parent_prefixes(candidate):
            if self.spec.match_file(prefix):
                return True
        return self.spec.match_file(candidate)

    def check(self, candidate: str) -> MatchResult:
        """Like ignores(), also naming the deciding pattern"""
        for prefix in _parent_prefixes(candidate):
            index = self._last_match(prefix)
            if index is not None and self.spec.patterns[index].include:
                return self._result(candidate, index)

        index = self._last_match(candidate)
        if index is None:
            return MatchResult(should_ignore=False, candidate=candidate)
        return self._result(candidate, index)

    def _last_match(self, path: str) -> Optional[int]:
        compiled = list(self.spec.patterns)
        for index in range(len(compiled) - 1, -1, -1):
            pattern = compiled[index]
            if pattern.include is None:
                continue
            if pattern.match_file(path) is not None:
                return index
        return None

    def _result(self, candidate: str, index: int) -> MatchResult:
        return MatchResult(
            should_ignore=bool(self.spec.patterns[index].include),
            candidate=candidate,
            matched_pattern=self.patterns[index],
            matched_directory=self.origins[index],
        )


def _parent_prefixes(candidate: str) -> List[str]:
    """'a/b/c' -> ['a/', 'a/b/']; a trailing '/' on the candidate is ignored"""
    parts = candidate.rstrip('/').split('/')
    return ['/'.join(parts[:i]) + '/' for i in range(1, len(parts))]


class MatcherComposer:
    """
    Builds and caches ComposedMatcher instances for directories under a root
    """

    def __init__(self, root: str, loader: RuleSetLoader,
                 default_patterns: Optional[Iterable[str]] = None):
        """
        Args:
            root: Normalized tree root
            loader: Rule-set loader shared with the caller
            default_patterns: Root-level patterns applied before any ignore file
        """
        self.root = root
        self._loader = loader
        self._default_patterns = tuple(default_patterns or ())
        self._factory = lookup_pattern(PATTERN_STYLE)
        self._cache: DirectoryCache[ComposedMatcher] = DirectoryCache('matchers')

    @property
    def cache(self) -> DirectoryCache[ComposedMatcher]:
        return self._cache

    async def matcher_for(self, directory: PathLike) -> ComposedMatcher:
        """
        Composed matcher for ``directory``.

        Walks from the root down to ``directory`` (inclusive), anchoring each
        ancestor's rules to the root and appending them in declaration order.
        """
        key = normalize_path(directory)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        entries: List[Tuple[str, Optional[str]]] = [
            (pattern, None) for pattern in self._default_patterns
            if self._names_path(pattern, None)
        ]
        for ancestor in ancestor_dirs(key, self.root):
            rule_set = await self._loader.load_rule_set(ancestor)
            if not rule_set.patterns:
                continue

            ancestor_rel = relative_to_root(ancestor, self.root) or ''
            entries.extend(
                (anchor_pattern(pattern, ancestor_rel), ancestor)
                for pattern in rule_set.patterns
                if self._names_path(pattern, ancestor)
            )

        matcher = self._compile(key, entries)
        self._cache.put(key, matcher)
        logger.trace(f"Composed {len(matcher)} patterns for {key}")
        return matcher

    def clear(self):
        """Forget every composed matcher"""
        self._cache.clear()

    @staticmethod
    def _names_path(pattern: str, origin: Optional[str]) -> bool:
        # Checked before anchoring: '/' in src/.gitignore would become 'src/'
        if names_no_path(pattern):
            logger.debug(f"Skipping pattern '{pattern}' from {origin or 'defaults'}: no path")
            return False
        return True

    def _compile(self, directory: str,
                 entries: List[Tuple[str, Optional[str]]]) -> ComposedMatcher:
        patterns = []
        origins = []
        compiled = []

        for pattern, origin in entries:
            try:
                compiled_pattern = self._factory(pattern)
            except (GitWildMatchPatternError, re.error) as e:
                logger.warning(f"Skipping invalid pattern '{pattern}' from {origin or 'defaults'}: {e}")
                continue
            patterns.append(pattern)
            origins.append(origin)
            compiled.append(compiled_pattern)

        return ComposedMatcher(
            directory=directory,
            patterns=tuple(patterns),
            origins=tuple(origins),
            spec=pathspec.PathSpec(compiled),
        )
