from flask import Blueprint
from flask_login import login_required, current_user
from http import HTTPStatus
from minigames.responses import SuccessResponse
from minigames.schemas import parse_body
from minigames.schemas.flip_tiles import CreateFlipTiles, UpdateFlipTiles
from minigames.services.game_list import flip_tiles as service

flip_tiles = Blueprint('flip_tiles', __name__)

FILE_FIELDS = ('thumbnail',)


@flip_tiles.route('/', methods=['POST'])
@login_required
def create_flip_tiles():
    data = parse_body(CreateFlipTiles, FILE_FIELDS)
    game = service.create_flip_tiles(data, current_user.id)
    return SuccessResponse(HTTPStatus.CREATED, 'Flip Tiles game created successfully', game.to_dict()).to_response()


@flip_tiles.route('/<string:game_id>', methods=['GET'])
@login_required
def get_flip_tiles(game_id):
    game = service.get_flip_tiles_detail(game_id, current_user.id, current_user.role)
    return SuccessResponse(HTTPStatus.OK, 'Get Flip Tiles game successfully', game).to_response()


@flip_tiles.route('/<string:game_id>', methods=['PATCH'])
@login_required
def update_flip_tiles(game_id):
    data = parse_body(UpdateFlipTiles, FILE_FIELDS)
    game = service.update_flip_tiles(data, game_id, current_user.id, current_user.role)
    return SuccessResponse(HTTPStatus.OK, 'Flip Tiles game updated successfully', game.to_dict()).to_response()


@flip_tiles.route('/<string:game_id>', methods=['DELETE'])
@login_required
def delete_flip_tiles(game_id):
    result = service.delete_flip_tiles(game_id, current_user.id, current_user.role)
    return SuccessResponse(HTTPStatus.OK, 'Flip Tiles game deleted successfully', result).to_response()
