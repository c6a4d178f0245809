"""
Rule-set loader: reads and parses one directory's ignore file
"""

import asyncio
import os
import re
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from .cache import DirectoryCache
from .constants import IGNORE_FILENAME, MAX_IGNORE_FILE_SIZE, MAX_PATTERNS_PER_FILE
from .paths import PathLike, normalize_path
from .utils import get_logger

logger = get_logger(__name__)

Reader = Callable[[str], Awaitable[str]]

_LINE_BREAK = re.compile(r'\r?\n')


@dataclass(frozen=True)
class RuleSet:
    """Ordered raw patterns declared by one directory's ignore file"""
    directory: str
    source: str
    patterns: Tuple[str, ...] = ()
    found: bool = False
    stats: Dict[str, int] = field(default_factory=dict, compare=False)

    def __len__(self) -> int:
        return len(self.patterns)

    def __iter__(self):
        return iter(self.patterns)


def parse_ignore_content(content: str) -> List[str]:
    """
    Split ignore file content into raw patterns.

    Lines are trimmed; blank lines and '#' comments are dropped. Order is kept.
    """
    patterns = []
    for line in _LINE_BREAK.split(content):
        stripped = line.strip()
        if not stripped or stripped.startswith('#'):
            continue
        patterns.append(stripped)
    return patterns


class IgnoreFileTooLarge(Exception):
    """Raised by the default reader before reading an oversized file"""

    def __init__(self, path: str, size: int):
        super().__init__(f"{path} is {size} bytes (max: {MAX_IGNORE_FILE_SIZE})")
        self.path = path
        self.size = size


def _read_text(path: str) -> str:
    # BOM is skipped and undecodable bytes are replaced so the other lines survive
    with open(path, 'r', encoding='utf-8-sig', errors='replace', newline='') as f:
        size = os.fstat(f.fileno()).st_size
        if size > MAX_IGNORE_FILE_SIZE:
            raise IgnoreFileTooLarge(path, size)
        return f.read()


async def read_text_file(path: str) -> str:
    """Read a UTF-8 text file without blocking the event loop"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _read_text, path)


class RuleSetLoader:
    """
    Loads and caches the rule set of individual directories.

    A missing or unreadable ignore file is an empty rule set, cached the same
    way as a real one. Read failures are logged and never raised.
    """

    def __init__(self, ignore_filename: str = IGNORE_FILENAME,
                 reader: Optional[Reader] = None):
        """
        Args:
            ignore_filename: Name of the rule file looked up in each directory
            reader: Coroutine returning the text of a file path; defaults to
                reading from the local filesystem
        """
        self.ignore_filename = ignore_filename
        self._reader = reader or read_text_file
        self._cache: DirectoryCache[RuleSet] = DirectoryCache('rule_sets')

    @property
    def cache(self) -> DirectoryCache[RuleSet]:
        return self._cache

    def rule_file_path(self, directory: PathLike) -> str:
        normalized = normalize_path(directory)
        if normalized.endswith('/'):
            return f"{normalized}{self.ignore_filename}"
        return f"{normalized}/{self.ignore_filename}"

    async def load_rule_set(self, directory: PathLike) -> RuleSet:
        """
        Rule set declared directly inside ``directory``.

        Args:
            directory: Absolute directory path

        Returns:
            Cached or freshly parsed RuleSet (possibly empty)
        """
        key = normalize_path(directory)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        file_path = self.rule_file_path(key)
        try:
            content = await self._reader(file_path)
        except (FileNotFoundError, NotADirectoryError):
            logger.trace(f"No ignore file at {file_path}")
            rule_set = RuleSet(directory=key, source=file_path)
        except IgnoreFileTooLarge as e:
            logger.warning(f"Ignore file too large, ignoring its rules: {e}")
            rule_set = RuleSet(directory=key, source=file_path, found=True)
        except Exception as e:
            logger.warning(f"Cannot read {file_path}, treating as empty: {e}")
            rule_set = RuleSet(directory=key, source=file_path)
        else:
            rule_set = self._build_rule_set(key, file_path, content)

        self._cache.put(key, rule_set)
        return rule_set

    def clear(self):
        """Forget every loaded rule set"""
        self._cache.clear()

    def _build_rule_set(self, directory: str, file_path: str, content: str) -> RuleSet:
        if len(content) > MAX_IGNORE_FILE_SIZE:
            logger.warning(
                f"Ignore file too large: {file_path} "
                f"({len(content)} chars, max: {MAX_IGNORE_FILE_SIZE}), ignoring its rules"
            )
            return RuleSet(directory=directory, source=file_path, found=True)

        patterns = parse_ignore_content(content)
        if len(patterns) > MAX_PATTERNS_PER_FILE:
            logger.warning(
                f"Too many patterns in {file_path}: {len(patterns)} "
                f"(max: {MAX_PATTERNS_PER_FILE}), truncating"
            )
            patterns = patterns[:MAX_PATTERNS_PER_FILE]

        total_lines = len(_LINE_BREAK.split(content)) if content else 0
        stats = {
            'total_lines': total_lines,
            'pattern_lines': len(patterns),
        }
        logger.debug(f"Loaded {len(patterns)} patterns from {file_path}")
        return RuleSet(
            directory=directory,
            source=file_path,
            patterns=tuple(patterns),
            found=True,
            stats=stats,
        )
