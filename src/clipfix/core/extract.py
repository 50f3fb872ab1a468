"""Turn project files into addressable pieces of script text."""

import json
import logging
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import ValidationError

from clipfix.config import Settings
from clipfix.core.errors import EntityParseError
from clipfix.core.patterns import unescape_control_chars
from clipfix.core.ports.filesystem import FileSystem
from clipfix.models import CodeLocation, EntityDocument, Entry

logger = logging.getLogger(__name__)

UNKNOWN_ANIMATION = "unknown"


def parse_entity(name: str, text: str) -> EntityDocument:
    try:
        return EntityDocument.model_validate(json.loads(text))
    except json.JSONDecodeError as exc:
        raise EntityParseError(name, str(exc)) from exc
    except ValidationError as exc:
        raise EntityParseError(name, f"{exc.error_count()} validation error(s)") from exc


def _layer_animations(document: EntityDocument) -> dict[str, str]:
    layer_to_animation: dict[str, str] = {}
    for animation in document.animations:
        name = animation.name if animation.name is not None else UNKNOWN_ANIMATION
        for layer_id in animation.layers:
            previous = layer_to_animation.get(layer_id)
            if previous is not None and previous != name:
                logger.warning("Layer %s is used by animations %r and %r; using %r", layer_id, previous, name, name)
            layer_to_animation[layer_id] = name
    return layer_to_animation


def _keyframe_layers(document: EntityDocument, layer_to_animation: Mapping[str, str]) -> dict[str, str]:
    keyframe_to_layer: dict[str, str] = {}
    for layer in document.layers:
        if layer.id not in layer_to_animation:
            continue
        for keyframe_id in layer.keyframes:
            previous = keyframe_to_layer.get(keyframe_id)
            if previous is not None and previous != layer.id:
                logger.warning("Keyframe %s is in layers %s and %s; using %s", keyframe_id, previous, layer.id, layer.id)
            keyframe_to_layer[keyframe_id] = layer.id
    return keyframe_to_layer


def resolve_keyframe_animations(document: EntityDocument) -> Mapping[str, str]:
    """Map each reachable keyframe id to the name of the animation that owns it.

    Keyframes of layers that no animation references are left out. When a layer or
    keyframe is claimed twice, the last claim wins.
    """
    layer_to_animation = _layer_animations(document)
    keyframe_to_layer = _keyframe_layers(document, layer_to_animation)
    return MappingProxyType(
        {keyframe_id: layer_to_animation[layer_id] for keyframe_id, layer_id in keyframe_to_layer.items()}
    )


def entity_locations(name: str, document: EntityDocument) -> list[CodeLocation]:
    keyframe_animations = resolve_keyframe_animations(document)
    locations: list[CodeLocation] = []
    for keyframe in document.keyframes:
        animation = keyframe_animations.get(keyframe.id)
        if animation is None:
            continue
        locations.append(
            CodeLocation(
                label=f"{name} @ {animation}",
                text=unescape_control_chars(keyframe.code or ""),
            )
        )
    return locations


async def extract_locations(fs: FileSystem, entry: Entry, settings: Settings) -> list[CodeLocation]:
    if settings.is_entity(entry.name):
        document = parse_entity(entry.name, await fs.read_text(entry))
        return entity_locations(entry.name, document)
    if settings.is_script(entry.name):
        return [CodeLocation(label=entry.name, text=await fs.read_text(entry))]
    return []
