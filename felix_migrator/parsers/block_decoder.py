"""
Decoding of Felix ``blocks`` rows into :data:`~felix_migrator.parsers.blocks.Block` models.

A row carries a type tag, a JSON ``content`` payload whose shape depends on
the tag and, for image blocks, the id of the associated ``medias`` row.
Decoding either yields exactly one block or raises :class:`DecodeError`;
nothing is skipped.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from felix_migrator.utils.errors import DecodeError
from .blocks import Block, BlockType, ImageRef

ImageLookup = Callable[[int], Optional[ImageRef]]

_BLOCK_ADAPTER: TypeAdapter[Block] = TypeAdapter(Block)
_SUPPORTED_TYPES = frozenset(t.value for t in BlockType)


class RawBlockRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    position: int
    type: str
    content: Optional[str] = None
    media_id: Optional[int] = None


def parse_payload(record: RawBlockRecord) -> Dict[str, Any]:
    """Parse the JSON payload of ``record``; ``null`` decodes to an empty payload."""
    if record.content is None:
        return {}
    try:
        payload = json.loads(record.content)
    except (TypeError, ValueError) as e:
        raise DecodeError(
            f"Malformed block payload: {e}",
            position=record.position,
            block_type=record.type,
        ) from e
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise DecodeError(
            f"Block payload must be a JSON object, got {type(payload).__name__}",
            position=record.position,
            block_type=record.type,
        )
    return payload


def resolve_image(record: RawBlockRecord, image_lookup: ImageLookup) -> Optional[ImageRef]:
    if record.media_id is None:
        return None
    image = image_lookup(record.media_id)
    if image is None:
        raise DecodeError(
            f"Image with ID {record.media_id} not found",
            position=record.position,
            block_type=record.type,
        )
    return image


def decode_block(record: RawBlockRecord, image_lookup: ImageLookup) -> Block:
    """
    Decode one raw ``blocks`` row.

    :param record: The row to decode.
    :param image_lookup: Resolves a ``medias`` id into an :class:`ImageRef`.
    :return: The concrete block for the row's type tag.
    :raises DecodeError: For an unsupported type tag, a payload that is not
        JSON or does not fit its block, or an image that cannot be found.
    """
    if record.type not in _SUPPORTED_TYPES:
        raise DecodeError(
            f"Block type {record.type} not supported",
            position=record.position,
            block_type=record.type,
        )

    data = dict(parse_payload(record))
    data["kind"] = record.type
    if record.type == BlockType.IMAGE.value:
        data["image"] = resolve_image(record, image_lookup)

    try:
        return _BLOCK_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise DecodeError(
            f"Invalid {record.type} block payload: {e.error_count()} validation error(s)",
            position=record.position,
            block_type=record.type,
        ) from e
