"""
Hierarchical ignore-file resolution.

Decides whether a path inside a project tree is excluded by the stacked
.gitignore-style files of its ancestor directories:
- later patterns override earlier ones, negations re-include
- nested rule files only affect their own subtree
- rule sets and composed matchers are cached per directory until reset()
"""

from .constants import IGNORE_FILENAME
from .anchoring import anchor_pattern
from .file_loader import RuleSet, RuleSetLoader, parse_ignore_content
from .rule_engine import ComposedMatcher, MatchResult, MatcherComposer
from .manager import FileEntry, GitignoreManager

__version__ = "0.1.0"

__all__ = [
    'IGNORE_FILENAME',
    'anchor_pattern',
    'parse_ignore_content',
    'RuleSet',
    'RuleSetLoader',
    'ComposedMatcher',
    'MatchResult',
    'MatcherComposer',
    'FileEntry',
    'GitignoreManager',
]
