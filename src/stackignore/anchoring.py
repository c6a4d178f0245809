"""
Rewriting of per-directory patterns into root-relative patterns.

A rule file scopes its patterns to the directory holding it. The composed
matcher evaluates paths relative to the tree root, so every pattern is
prefixed with its directory's root-relative path first.
"""

from typing import Tuple


def split_negation(pattern: str) -> Tuple[bool, str]:
    """Return (negated, body) for a raw pattern"""
    if pattern.startswith('!'):
        return True, pattern[1:]
    return False, pattern


def anchor_pattern(pattern: str, dir_relative: str) -> str:
    """
    Anchor ``pattern`` declared in ``dir_relative`` (relative to the root).

    Examples:
        anchor_pattern('*.log', '')        -> '*.log'
        anchor_pattern('/temp', 'src')     -> 'src/temp'
        anchor_pattern('!keep', 'src/lib') -> '!src/lib/keep'
    """
    negated, body = split_negation(pattern)

    if not dir_relative:
        adjusted = body
    elif body.startswith('/'):
        adjusted = f"{dir_relative}{body}"
    else:
        adjusted = f"{dir_relative}/{body}"

    return f"!{adjusted}" if negated else adjusted


def names_no_path(pattern: str) -> bool:
    """
    True for patterns like '/', '!/' or '!' whose body has no path segment.

    Anchoring them would turn '/' into 'src/', a directory pattern matching
    every 'src' directory in the tree, so such patterns are dropped instead.
    """
    _, body = split_negation(pattern)
    return not body.strip('/')
