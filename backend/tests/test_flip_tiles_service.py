import io
import uuid

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.datastructures import FileStorage

from minigames import db
from minigames.models import Game, Role, User
from minigames.responses import ErrorResponse
from minigames.schemas.flip_tiles import CreateFlipTiles, UpdateFlipTiles
from minigames.services.game_list import flip_tiles as service
from minigames.services.game_list.access import can_manage


class RecordingStorage:
    """In-memory stand-in that remembers which blobs exist."""

    def __init__(self, fail_remove=False):
        self.blobs = set()
        self.removed = []
        self.fail_remove = fail_remove

    def upload(self, path_prefix, file):
        path = f'{path_prefix}/{uuid.uuid4().hex}.png'
        self.blobs.add(path)
        return path

    def remove(self, path):
        if self.fail_remove:
            raise OSError('storage offline')
        self.removed.append(path)
        self.blobs.discard(path)


def upload(name='thumb.png'):
    return FileStorage(stream=io.BytesIO(b'img'), filename=name, content_type='image/png')


def create_input(title='Quiz Night', tiles=None):
    tiles = tiles or [{'label': 'A', 'color': 'red'}, {'label': 'B', 'color': 'blue'}]
    return CreateFlipTiles(title=title, thumbnail=upload(), tiles=tiles)


def user_id(username):
    return User.query.filter_by(username=username).first().id


def test_create_stores_tiles_and_thumbnail(app_ctx):
    storage = RecordingStorage()
    game = service.create_flip_tiles(create_input(), user_id('owner'), storage=storage)
    assert game.game_json == {'tiles': [{'label': 'A', 'color': 'red'}, {'label': 'B', 'color': 'blue'}]}
    assert game.thumbnail_image in storage.blobs
    assert game.thumbnail_image.startswith(f'game/flip-tiles/{game.id}/')
    assert game.description == ''


def test_create_keeps_client_tile_ids(app_ctx):
    tiles = [{'id': 't1', 'label': 'A', 'color': 'red'}, {'label': 'B', 'color': 'blue'}]
    game = service.create_flip_tiles(create_input(tiles=tiles), user_id('owner'), storage=RecordingStorage())
    assert game.game_json['tiles'] == tiles


def test_duplicate_name_creates_nothing(app_ctx):
    storage = RecordingStorage()
    service.create_flip_tiles(create_input(), user_id('owner'), storage=storage)
    with pytest.raises(ErrorResponse) as exc:
        service.create_flip_tiles(create_input(), user_id('other'), storage=storage)
    assert exc.value.status_code == 400
    assert len(storage.blobs) == 1
    assert Game.query.count() == 1


def test_failed_commit_discards_uploaded_blob(app_ctx, monkeypatch):
    storage = RecordingStorage()

    def broken_commit(self):
        raise OperationalError('INSERT', {}, Exception('disk full'))

    monkeypatch.setattr(type(db.session()), 'commit', broken_commit)
    with pytest.raises(ErrorResponse) as exc:
        service.create_flip_tiles(create_input(), user_id('owner'), storage=storage)
    assert exc.value.status_code == 500
    assert exc.value.message == 'Failed to create Flip Tiles game'
    assert storage.blobs == set()
    assert len(storage.removed) == 1


def test_concurrent_duplicate_at_commit_is_bad_request(app_ctx, monkeypatch):
    storage = RecordingStorage()

    def racing_commit(self):
        raise IntegrityError('INSERT INTO game', {}, Exception('UNIQUE constraint failed: game.name'))

    monkeypatch.setattr(type(db.session()), 'commit', racing_commit)
    with pytest.raises(ErrorResponse) as exc:
        service.create_flip_tiles(create_input(), user_id('owner'), storage=storage)
    assert exc.value.status_code == 400
    assert exc.value.message == 'Game name is already used'
    assert storage.blobs == set()
    monkeypatch.undo()
    assert Game.query.count() == 0


def test_failed_cleanup_does_not_mask_create_error(app_ctx, monkeypatch):
    storage = RecordingStorage(fail_remove=True)

    def racing_commit(self):
        raise IntegrityError('INSERT INTO game', {}, Exception('UNIQUE constraint failed: game.name'))

    monkeypatch.setattr(type(db.session()), 'commit', racing_commit)
    with pytest.raises(ErrorResponse) as exc:
        service.create_flip_tiles(create_input(), user_id('owner'), storage=storage)
    assert exc.value.status_code == 400
    assert exc.value.message == 'Game name is already used'
    # The blob could not be removed and is left orphaned
    assert len(storage.blobs) == 1


def test_failed_update_keeps_previous_thumbnail(app_ctx, monkeypatch):
    storage = RecordingStorage()
    owner = user_id('owner')
    game = service.create_flip_tiles(create_input(), owner, storage=storage)
    game_id, original = game.id, game.thumbnail_image

    def broken_commit(self):
        raise OperationalError('UPDATE', {}, Exception('connection lost'))

    monkeypatch.setattr(type(db.session()), 'commit', broken_commit)
    with pytest.raises(ErrorResponse) as exc:
        service.update_flip_tiles(UpdateFlipTiles(thumbnail=upload()), game_id, owner, Role.USER, storage=storage)
    assert exc.value.status_code == 500
    assert storage.blobs == {original}
    monkeypatch.undo()
    assert db.session.get(Game, game_id).thumbnail_image == original


def test_update_removes_previous_blob_after_commit(app_ctx):
    storage = RecordingStorage()
    owner = user_id('owner')
    game = service.create_flip_tiles(create_input(), owner, storage=storage)
    original = game.thumbnail_image

    updated = service.update_flip_tiles(UpdateFlipTiles(thumbnail=upload()), game.id, owner, Role.USER,
                                        storage=storage)
    assert updated.thumbnail_image != original
    assert storage.removed == [original]
    assert storage.blobs == {updated.thumbnail_image}


def test_update_without_fields_changes_nothing(app_ctx):
    storage = RecordingStorage()
    owner = user_id('owner')
    game = service.create_flip_tiles(create_input(), owner, storage=storage)
    before = game.to_dict()

    after = service.update_flip_tiles(UpdateFlipTiles(), game.id, owner, Role.USER, storage=storage).to_dict()
    for key in ('name', 'description', 'thumbnail_image', 'game_json'):
        assert after[key] == before[key]
    assert storage.removed == []


def test_delete_survives_storage_failure(app_ctx):
    owner = user_id('owner')
    game = service.create_flip_tiles(create_input(), owner, storage=RecordingStorage())
    game_id = game.id

    result = service.delete_flip_tiles(game_id, owner, Role.USER, storage=RecordingStorage(fail_remove=True))
    assert result == {'message': 'Flip Tiles game deleted successfully'}
    assert db.session.get(Game, game_id) is None


def test_detail_defaults_missing_tiles(app_ctx):
    owner = user_id('owner')
    game = service.create_flip_tiles(create_input(), owner, storage=RecordingStorage())
    game.game_json = {}
    db.session.commit()

    view = service.get_flip_tiles_detail(game.id, owner, Role.USER)
    assert view['tiles'] == []


def test_detail_corrupt_payload_is_internal_error(app_ctx):
    owner = user_id('owner')
    game = service.create_flip_tiles(create_input(), owner, storage=RecordingStorage())
    game.game_json = {'tiles': [{'label': 'only label'}]}
    db.session.commit()

    with pytest.raises(ErrorResponse) as exc:
        service.get_flip_tiles_detail(game.id, owner, Role.USER)
    assert exc.value.status_code == 500
    assert exc.value.message == 'Failed to get Flip Tiles game'


@pytest.mark.parametrize('role, same_user, allowed', [
    (Role.USER, True, True),
    (Role.USER, False, False),
    (Role.ADMIN, False, False),
    (Role.SUPER_ADMIN, False, True),
    ('SUPER_ADMIN', False, True),
])
def test_can_manage(role, same_user, allowed):
    game = Game(creator_id=1)
    assert can_manage(game, 1 if same_user else 2, role) is allowed
