"""Shared fixtures for stackignore tests"""

import pytest


class MemoryReader:
    """Async reader over an in-memory {path: text} map that records reads"""

    def __init__(self, files):
        self.files = dict(files)
        self.calls = []

    async def __call__(self, path):
        self.calls.append(path)
        if path not in self.files:
            raise FileNotFoundError(path)
        content = self.files[path]
        if isinstance(content, BaseException):
            raise content
        return content


@pytest.fixture
def memory_reader():
    """Factory building a MemoryReader from a {path: text} dict"""
    return MemoryReader


@pytest.fixture
def write_ignore(tmp_path):
    """Write a .gitignore under tmp_path/<relative_dir> and return its path"""
    def _write(relative_dir, content, filename=".gitignore"):
        directory = tmp_path / relative_dir if relative_dir else tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        ignore_file = directory / filename
        ignore_file.write_text(content)
        return ignore_file
    return _write
