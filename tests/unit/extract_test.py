"""Tests for entity parsing and code location extraction."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from clipfix.config import Settings
from clipfix.core.errors import EntityParseError
from clipfix.core.extract import (
    entity_locations,
    extract_locations,
    parse_entity,
    resolve_keyframe_animations,
)
from clipfix.fs import InMemoryFileSystem
from clipfix.models import CodeLocation, EntityDocument

MakeEntity = Callable[..., str]


def _document(make_entity: MakeEntity, **kwargs: Any) -> EntityDocument:
    return parse_entity("hero.entity", make_entity(**kwargs))


class TestParseEntity:
    def test_reads_ids_and_code(self, make_entity: MakeEntity) -> None:
        doc = _document(
            make_entity,
            animations=[("idle", ["L1"])],
            layers=[("L1", ["K1"])],
            keyframes=[("K1", 'AudioClip.play("x");')],
        )
        assert doc.animations[0].name == "idle"
        assert doc.layers[0].id == "L1"
        assert doc.keyframes[0].code == 'AudioClip.play("x");'

    def test_missing_code_is_none(self, make_entity: MakeEntity) -> None:
        doc = _document(make_entity, animations=[], layers=[], keyframes=[("K1", None)])
        assert doc.keyframes[0].code is None

    def test_malformed_json_raises(self) -> None:
        with pytest.raises(EntityParseError, match="broken.entity"):
            parse_entity("broken.entity", "{not json")

    def test_wrong_shape_raises(self) -> None:
        with pytest.raises(EntityParseError):
            parse_entity("odd.entity", '{"layers": [{"keyframes": []}]}')


class TestResolveKeyframeAnimations:
    def test_follows_animation_layer_keyframe_chain(self, make_entity: MakeEntity) -> None:
        doc = _document(
            make_entity,
            animations=[("idle", ["L1"]), ("run", ["L2"])],
            layers=[("L1", ["K1"]), ("L2", ["K2", "K3"])],
            keyframes=[("K1", ""), ("K2", ""), ("K3", "")],
        )
        assert dict(resolve_keyframe_animations(doc)) == {"K1": "idle", "K2": "run", "K3": "run"}

    def test_unreferenced_layer_is_ignored(self, make_entity: MakeEntity) -> None:
        doc = _document(
            make_entity,
            animations=[("idle", ["L1"])],
            layers=[("L1", ["K1"]), ("orphan", ["K2"])],
            keyframes=[("K1", ""), ("K2", 'AudioClip.play("x");')],
        )
        assert "K2" not in resolve_keyframe_animations(doc)

    def test_last_animation_wins_for_shared_layer(
        self, make_entity: MakeEntity, caplog: pytest.LogCaptureFixture
    ) -> None:
        doc = _document(
            make_entity,
            animations=[("idle", ["L1"]), ("run", ["L1"])],
            layers=[("L1", ["K1"])],
            keyframes=[("K1", "")],
        )
        assert resolve_keyframe_animations(doc)["K1"] == "run"
        assert "L1" in caplog.text

    def test_result_is_read_only(self, make_entity: MakeEntity) -> None:
        doc = _document(make_entity, animations=[("idle", ["L1"])], layers=[("L1", ["K1"])], keyframes=[("K1", "")])
        with pytest.raises(TypeError):
            resolve_keyframe_animations(doc)["K9"] = "x"  # type: ignore[index]


class TestEntityLocations:
    def test_one_location_per_reachable_keyframe(self, make_entity: MakeEntity) -> None:
        doc = _document(
            make_entity,
            animations=[("attack", ["L1"])],
            layers=[("L1", ["K1"])],
            keyframes=[("K1", 'AudioClip.play("x");')],
        )
        assert entity_locations("hero.entity", doc) == [
            CodeLocation(label="hero.entity @ attack", text='AudioClip.play("x");'),
        ]

    def test_missing_code_yields_empty_text(self, make_entity: MakeEntity) -> None:
        doc = _document(make_entity, animations=[("idle", ["L1"])], layers=[("L1", ["K1"])], keyframes=[("K1", None)])
        assert entity_locations("hero.entity", doc)[0].text == ""

    def test_nested_escapes_are_unescaped(self, make_entity: MakeEntity) -> None:
        doc = _document(
            make_entity,
            animations=[("idle", ["L1"])],
            layers=[("L1", ["K1"])],
            keyframes=[("K1", "var a = 1;\\nAudioClip.play(\\\"x\\\");")],
        )
        assert entity_locations("hero.entity", doc)[0].text == 'var a = 1;\nAudioClip.play("x");'

    def test_follows_top_level_keyframe_order(self, make_entity: MakeEntity) -> None:
        doc = _document(
            make_entity,
            animations=[("idle", ["L1"]), ("run", ["L2"])],
            layers=[("L1", ["K1"]), ("L2", ["K2"])],
            keyframes=[("K2", "b"), ("K1", "a")],
        )
        labels = [loc.label for loc in entity_locations("hero.entity", doc)]
        assert labels == ["hero.entity @ run", "hero.entity @ idle"]


class TestExtractLocations:
    @pytest.mark.asyncio
    async def test_script_file_is_one_location(self, settings: Settings) -> None:
        fs = InMemoryFileSystem({"scripts/Hero.hx": 'AudioClip.play("x");\n'})
        locations = await extract_locations(fs, fs.entry("scripts/Hero.hx"), settings)
        assert locations == [CodeLocation(label="Hero.hx", text='AudioClip.play("x");\n')]

    @pytest.mark.asyncio
    async def test_entity_file_is_resolved(self, settings: Settings, make_entity: MakeEntity) -> None:
        fs = InMemoryFileSystem(
            {
                "hero.entity": make_entity(
                    animations=[("idle", ["L1"])],
                    layers=[("L1", ["K1"])],
                    keyframes=[("K1", 'AudioClip.play("x");')],
                )
            }
        )
        locations = await extract_locations(fs, fs.entry("hero.entity"), settings)
        assert [loc.label for loc in locations] == ["hero.entity @ idle"]

    @pytest.mark.asyncio
    async def test_other_files_yield_nothing(self, settings: Settings) -> None:
        fs = InMemoryFileSystem({"notes.txt": 'AudioClip.play("x");', "Hero.HX": 'AudioClip.play("x");'})
        assert await extract_locations(fs, fs.entry("notes.txt"), settings) == []
        assert await extract_locations(fs, fs.entry("Hero.HX"), settings) == []
        assert fs.reads == []
