import json
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from werkzeug.datastructures import FileStorage

MIN_TILES = 2


class Tile(BaseModel):
    id: Optional[str] = None
    label: str = Field(min_length=1)
    color: str = Field(min_length=1)


class FlipTilesPayload(BaseModel):
    """Shape of ``game_json`` for games whose template slug is ``flip-tiles``."""

    tiles: List[Tile] = Field(default_factory=list)


def _coerce_tiles(value: Any) -> Any:
    # Multipart forms can only carry strings, so tiles arrive JSON-encoded there
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError(f'Tiles must be a JSON array: {exc.msg}')
    if not isinstance(value, list):
        raise ValueError('Tiles must be a JSON array')
    return value


def _check_tile_count(tiles: List[Tile]) -> List[Tile]:
    if len(tiles) < MIN_TILES:
        raise ValueError(f'At least {MIN_TILES} tiles are required')
    return tiles


def _check_thumbnail(value: Any) -> Any:
    if value is None:
        return value
    if not isinstance(value, FileStorage) or not value.filename:
        raise ValueError('Thumbnail must be an uploaded file')
    if not (value.mimetype or '').startswith('image/'):
        raise ValueError('Thumbnail must be an image')
    return value


class CreateFlipTiles(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    title: str = Field(min_length=1)
    description: Optional[str] = None
    thumbnail: FileStorage
    tiles: List[Tile]

    @field_validator('tiles', mode='before')
    @classmethod
    def coerce_tiles(cls, value):
        return _coerce_tiles(value)

    @field_validator('tiles')
    @classmethod
    def check_tile_count(cls, value):
        return _check_tile_count(value)

    @field_validator('thumbnail', mode='before')
    @classmethod
    def check_thumbnail(cls, value):
        if value is None:
            raise ValueError('Thumbnail is required')
        return _check_thumbnail(value)


class UpdateFlipTiles(BaseModel):
    """Partial update; only fields in ``model_fields_set`` are applied."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    thumbnail: Optional[FileStorage] = None
    tiles: Optional[List[Tile]] = None

    # Fields may be left out, but a field that is sent must carry a value
    @field_validator('title', 'description', mode='before')
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f'{info.field_name} must not be null')
        return value

    @field_validator('tiles', mode='before')
    @classmethod
    def coerce_tiles(cls, value):
        return _coerce_tiles(value)

    @field_validator('tiles')
    @classmethod
    def check_tile_count(cls, value):
        return _check_tile_count(value)

    @field_validator('thumbnail', mode='before')
    @classmethod
    def check_thumbnail(cls, value):
        if value is None:
            raise ValueError('thumbnail must not be null')
        return _check_thumbnail(value)


def tiles_to_json(tiles: List[Tile]) -> list:
    return [tile.model_dump(exclude_none=True) for tile in tiles]
