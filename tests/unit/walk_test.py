"""Tests for the recursive tree walk and report aggregation."""

from __future__ import annotations

import pytest

from clipfix.config import Settings
from clipfix.core.errors import EntityParseError
from clipfix.core.rewrite import fix_audio_clip
from clipfix.core.walk import apply_to_tree, combine_reports, walk
from clipfix.fs import InMemoryFileSystem
from clipfix.models import Entry, MatchReport, UnresolvedMatch


def _tree() -> InMemoryFileSystem:
    return InMemoryFileSystem(
        {
            "a.hx": 'AudioClip.play("a");',
            "scripts/b.hx": 'AudioClip.play("b"); AudioClip.play("c");',
            "scripts/deep/c.hx": "AudioClip.play(pick());",
            "scripts/deep/er/d.hx": 'AudioClip.play("d");',
            "art/sprite.png": "binary",
        }
    )


class TestWalk:
    @pytest.mark.asyncio
    async def test_visits_every_file_once(self) -> None:
        fs = _tree()

        async def _visit(entry: Entry) -> str:
            return entry.path

        visited = await walk(fs, fs.root(), _visit)

        assert sorted(visited) == sorted(fs.files)
        assert len(visited) == len(set(visited))

    @pytest.mark.asyncio
    async def test_max_depth_skips_deep_directories(self, caplog: pytest.LogCaptureFixture) -> None:
        fs = _tree()

        async def _visit(entry: Entry) -> str:
            return entry.path

        visited = await walk(fs, fs.root(), _visit, max_depth=1)

        assert sorted(visited) == ["a.hx", "art/sprite.png", "scripts/b.hx"]
        assert "scripts/deep" in caplog.text

    @pytest.mark.asyncio
    async def test_empty_directory(self) -> None:
        fs = InMemoryFileSystem()

        async def _visit(entry: Entry) -> str:
            return entry.path

        assert await walk(fs, fs.root(), _visit) == []


class TestCombineReports:
    def test_sums_and_concatenates(self) -> None:
        first = MatchReport(path="a", fixed=2, unresolved=[UnresolvedMatch(location="a line 1", line="x")])
        second = MatchReport(path="b", fixed=3, unresolved=[UnresolvedMatch(location="b line 4", line="y")])

        aggregate = combine_reports([first, second])

        assert aggregate.fixed == 5
        assert [m.location for m in aggregate.unresolved] == ["a line 1", "b line 4"]
        assert aggregate.files == 2

    def test_empty(self) -> None:
        assert combine_reports([]).is_empty


class TestApplyToTree:
    @pytest.mark.asyncio
    async def test_aggregates_fix_counts(self, settings: Settings) -> None:
        fs = _tree()

        aggregate = await apply_to_tree(fs, fs.root(), fix_audio_clip, settings)

        assert aggregate.fixed == 4
        assert aggregate.unresolved == [
            UnresolvedMatch(location="c.hx line 1", line="AudioClip.play(pick());"),
        ]
        assert aggregate.files == 5
        assert aggregate.errors == []

    @pytest.mark.asyncio
    async def test_isolates_failing_file(self, settings: Settings) -> None:
        fs = InMemoryFileSystem({"bad.entity": "{oops", "good.hx": 'AudioClip.play("a");'})

        aggregate = await apply_to_tree(fs, fs.root(), fix_audio_clip, settings)

        assert aggregate.fixed == 1
        assert [error.path for error in aggregate.errors] == ["bad.entity"]
        assert "bad.entity" in aggregate.errors[0].message

    @pytest.mark.asyncio
    async def test_fail_fast_reraises(self) -> None:
        fs = InMemoryFileSystem({"bad.entity": "{oops", "good.hx": 'AudioClip.play("a");'})

        with pytest.raises(EntityParseError):
            await apply_to_tree(fs, fs.root(), fix_audio_clip, Settings(fail_fast=True))

        assert fs.files["good.hx"] == 'AudioClip.play("a");'
