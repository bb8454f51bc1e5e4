"""Flip Tiles game definitions: create, detail, update, delete.

Blob uploads cannot join the database transaction, so each operation
orders them around the commit: new blobs are written before the commit
and discarded if it fails, old blobs are removed only after it succeeds.
"""
import uuid
from http import HTTPStatus
from typing import List, Optional

from flask import current_app

from minigames import db
from minigames.models import Game, GameTemplate
from minigames.responses import ErrorResponse
from minigames.schemas import load_game_payload
from minigames.schemas.flip_tiles import CreateFlipTiles, UpdateFlipTiles, tiles_to_json
from minigames.services.game_list.access import discard_blob, get_owned_game, transaction
from minigames.storage import Storage, get_storage

FLIP_TILES_SLUG = 'flip-tiles'
GAME_TYPE_NAME = 'Flip Tiles'
DUPLICATE_NAME = 'Game name is already used'


def _thumbnail_prefix(game_id: str) -> str:
    return f'game/{FLIP_TILES_SLUG}/{game_id}'


def create_flip_tiles(data: CreateFlipTiles, creator_id, storage: Optional[Storage] = None) -> Game:
    storage = storage or get_storage()
    uploaded: List[str] = []
    try:
        with transaction('create_flip_tiles', 'Failed to create Flip Tiles game', DUPLICATE_NAME):
            if Game.query.filter_by(name=data.title).first() is not None:
                raise ErrorResponse(HTTPStatus.BAD_REQUEST, DUPLICATE_NAME)

            template = GameTemplate.query.filter_by(slug=FLIP_TILES_SLUG).first()
            if template is None:
                raise ErrorResponse(HTTPStatus.NOT_FOUND, 'Flip Tiles game template not found')

            if not data.thumbnail:
                raise ErrorResponse(HTTPStatus.BAD_REQUEST, 'Thumbnail is required')

            # Id first so the blob lands under its final namespace
            game_id = str(uuid.uuid4())
            uploaded.append(storage.upload(_thumbnail_prefix(game_id), data.thumbnail))

            game = Game(
                id=game_id,
                name=data.title,
                description=data.description or '',
                creator_id=creator_id,
                game_template_id=template.id,
                thumbnail_image=uploaded[0],
                game_json={'tiles': tiles_to_json(data.tiles)},
            )
            db.session.add(game)
    except ErrorResponse:
        for path in uploaded:
            discard_blob(storage, path, 'create_flip_tiles')
        raise

    current_app.logger.info(f"[create_flip_tiles] game={game.id} creator={creator_id} tiles={len(data.tiles)}")
    return game


def get_flip_tiles_detail(game_id: str, user_id, user_role) -> dict:
    with transaction('get_flip_tiles_detail', 'Failed to get Flip Tiles game'):
        game = get_owned_game(game_id, FLIP_TILES_SLUG, GAME_TYPE_NAME, user_id, user_role, 'access')
        payload = load_game_payload(FLIP_TILES_SLUG, game.game_json)
        return {
            'id': game.id,
            'title': game.name,
            'description': game.description,
            'thumbnail_image': game.thumbnail_image,
            'is_published': game.is_published,
            'tiles': tiles_to_json(payload.tiles),
        }


def update_flip_tiles(data: UpdateFlipTiles, game_id: str, user_id, user_role,
                      storage: Optional[Storage] = None) -> Game:
    storage = storage or get_storage()
    uploaded: List[str] = []
    replaced: Optional[str] = None
    provided = data.model_fields_set
    try:
        with transaction('update_flip_tiles', 'Failed to update Flip Tiles game', DUPLICATE_NAME):
            game = get_owned_game(game_id, FLIP_TILES_SLUG, GAME_TYPE_NAME, user_id, user_role, 'update')

            if 'title' in provided and data.title != game.name:
                clash = Game.query.filter(Game.name == data.title, Game.id != game.id).first()
                if clash is not None:
                    raise ErrorResponse(HTTPStatus.BAD_REQUEST, DUPLICATE_NAME)
                game.name = data.title

            # An explicit empty string clears the description
            if 'description' in provided:
                game.description = data.description

            if 'tiles' in provided:
                payload = dict(game.game_json or {})
                payload['tiles'] = tiles_to_json(data.tiles)
                game.game_json = payload

            if 'thumbnail' in provided:
                path = storage.upload(_thumbnail_prefix(game.id), data.thumbnail)
                uploaded.append(path)
                replaced = game.thumbnail_image
                game.thumbnail_image = path
    except ErrorResponse:
        for path in uploaded:
            discard_blob(storage, path, 'update_flip_tiles')
        raise

    if replaced:
        discard_blob(storage, replaced, 'update_flip_tiles')
    current_app.logger.info(f"[update_flip_tiles] game={game.id} by={user_id} fields={sorted(provided)}")
    return game


def delete_flip_tiles(game_id: str, user_id, user_role, storage: Optional[Storage] = None) -> dict:
    storage = storage or get_storage()
    with transaction('delete_flip_tiles', 'Failed to delete Flip Tiles game'):
        game = get_owned_game(game_id, FLIP_TILES_SLUG, GAME_TYPE_NAME, user_id, user_role, 'delete')
        thumbnail = game.thumbnail_image
        db.session.delete(game)

    if thumbnail:
        discard_blob(storage, thumbnail, 'delete_flip_tiles')
    current_app.logger.info(f"[delete_flip_tiles] game={game_id} by={user_id}")
    return {'message': 'Flip Tiles game deleted successfully'}
