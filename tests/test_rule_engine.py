#!/usr/bin/env python3
"""
Tests for composing stacked rule sets into per-directory matchers
"""

import logging

import pytest

from stackignore.file_loader import RuleSetLoader
from stackignore.rule_engine import MatcherComposer


@pytest.fixture
def files():
    return {
        "/proj/.gitignore": "node_modules\n*.log\n!keep.log\n",
        "/proj/src/.gitignore": "/temp\n*.gen.ts\n",
        "/proj/src/lib/.gitignore": "!/temp\n",
    }


@pytest.fixture
def composer(files, memory_reader):
    loader = RuleSetLoader(reader=memory_reader(files))
    return MatcherComposer("/proj", loader)


@pytest.mark.asyncio
async def test_root_matcher_has_root_rules(composer):
    matcher = await composer.matcher_for("/proj")

    assert matcher.patterns == ("node_modules", "*.log", "!keep.log")
    assert matcher.origins == ("/proj", "/proj", "/proj")


@pytest.mark.asyncio
async def test_patterns_composed_root_to_leaf(composer):
    """Ancestors contribute in root-to-leaf order, in-file order preserved"""
    matcher = await composer.matcher_for("/proj/src/lib")

    assert matcher.patterns == (
        "node_modules",
        "*.log",
        "!keep.log",
        "src/temp",
        "src/*.gen.ts",
        "!src/lib/temp",
    )
    assert matcher.origins[-1] == "/proj/src/lib"


@pytest.mark.asyncio
async def test_matcher_cached_per_directory(composer):
    first = await composer.matcher_for("/proj/src")
    second = await composer.matcher_for("/proj/src/")

    assert first is second
    assert len(composer.cache) == 1

    composer.clear()
    assert len(composer.cache) == 0
    assert await composer.matcher_for("/proj/src") is not first


@pytest.mark.asyncio
async def test_last_match_wins(memory_reader):
    reader = memory_reader({"/proj/.gitignore": "!keep.log\n*.log\n"})
    composer = MatcherComposer("/proj", RuleSetLoader(reader=reader))
    matcher = await composer.matcher_for("/proj")

    # Negation declared before the exclusion has no effect
    assert matcher.ignores("keep.log")


@pytest.mark.asyncio
async def test_check_reports_deciding_pattern(composer):
    matcher = await composer.matcher_for("/proj")

    excluded = matcher.check("debug.log")
    assert excluded.should_ignore
    assert excluded.matched_pattern == "*.log"
    assert excluded.matched_directory == "/proj"

    reincluded = matcher.check("keep.log")
    assert not reincluded.should_ignore
    assert reincluded.matched_pattern == "!keep.log"

    untouched = matcher.check("README.md")
    assert not untouched.should_ignore
    assert untouched.matched_pattern is None


@pytest.mark.asyncio
async def test_outside_directory_uses_root_rules(composer):
    matcher = await composer.matcher_for("/elsewhere/src")

    assert matcher.patterns == ("node_modules", "*.log", "!keep.log")


@pytest.mark.asyncio
async def test_default_patterns_come_first(memory_reader):
    reader = memory_reader({"/proj/.gitignore": "!.env.example\n"})
    composer = MatcherComposer("/proj", RuleSetLoader(reader=reader),
                               default_patterns=[".env*"])
    matcher = await composer.matcher_for("/proj")

    assert matcher.patterns == (".env*", "!.env.example")
    assert matcher.origins == (None, "/proj")
    assert matcher.ignores(".env.local")
    assert not matcher.ignores(".env.example")


@pytest.mark.asyncio
async def test_bare_slash_pattern_dropped(memory_reader):
    """'/' names no path; anchored it would match every 'src' directory"""
    reader = memory_reader({
        "/proj/.gitignore": "/\n",
        "/proj/src/.gitignore": "/\n!/\n*.o\n",
    })
    composer = MatcherComposer("/proj", RuleSetLoader(reader=reader))
    matcher = await composer.matcher_for("/proj/src")

    assert matcher.patterns == ("src/*.o",)
    assert not matcher.ignores("src/")
    assert not matcher.ignores("other/src/")


@pytest.mark.asyncio
async def test_invalid_pattern_skipped(memory_reader, caplog):
    reader = memory_reader({"/proj/.gitignore": "[z-a]\n*.log\n"})
    composer = MatcherComposer("/proj", RuleSetLoader(reader=reader))

    with caplog.at_level(logging.WARNING, logger="stackignore"):
        matcher = await composer.matcher_for("/proj")

    assert matcher.patterns == ("*.log",)
    assert "[z-a]" in caplog.text
    assert matcher.ignores("a.log")


@pytest.mark.asyncio
async def test_excluded_parent_cannot_be_reincluded(memory_reader):
    reader = memory_reader({"/proj/.gitignore": "build/\n!build/keep.txt\n"})
    composer = MatcherComposer("/proj", RuleSetLoader(reader=reader))
    matcher = await composer.matcher_for("/proj/build")

    assert matcher.ignores("build/keep.txt")

    result = matcher.check("build/keep.txt")
    assert result.should_ignore
    assert result.matched_pattern == "build/"
