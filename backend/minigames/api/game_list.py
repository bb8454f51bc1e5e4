from flask import Blueprint
from minigames.api.flip_tiles import flip_tiles

game_list = Blueprint('game_list', __name__)

# Each game-type module is a blueprint mounted under its template slug.
# Sibling types (quiz, anagram, speed-sorting, pair-or-no-pair, type-speed)
# attach here the same way once their modules exist.
GAME_TYPE_BLUEPRINTS = [
    ('/flip-tiles', flip_tiles),
]

for url_prefix, blueprint in GAME_TYPE_BLUEPRINTS:
    game_list.register_blueprint(blueprint, url_prefix=url_prefix)
