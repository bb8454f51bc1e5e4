from contextlib import contextmanager
from http import HTTPStatus
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from minigames import db
from minigames.models import Game, Role
from minigames.responses import ErrorResponse, internal_error
from minigames.storage import Storage


def can_manage(game: Game, user_id, user_role) -> bool:
    return user_role == Role.SUPER_ADMIN or game.creator_id == user_id


def get_owned_game(game_id: str, slug: str, type_name: str, user_id, user_role, action: str) -> Game:
    """Load a game of the given type that the caller may ``action``.

    404 when missing, 400 when it belongs to another game type, 403 when the
    caller is neither its creator nor a super admin.
    """
    game = db.session.get(Game, game_id)
    if game is None:
        raise ErrorResponse(HTTPStatus.NOT_FOUND, 'Game not found')

    if game.game_template is None or game.game_template.slug != slug:
        raise ErrorResponse(HTTPStatus.BAD_REQUEST, f'Game is not a {type_name} game')

    if not can_manage(game, user_id, user_role):
        raise ErrorResponse(HTTPStatus.FORBIDDEN, f'You are not authorized to {action} this game')

    return game


@contextmanager
def transaction(tag: str, failure_message: str, conflict_message: Optional[str] = None):
    """Run the block in one session transaction and commit on exit.

    ``ErrorResponse`` passes through after a rollback. A unique-constraint
    violation becomes a 400 with ``conflict_message`` when one is given.
    Anything else is logged and replaced by a generic 500.
    """
    try:
        yield db.session
        db.session.commit()
    except ErrorResponse:
        db.session.rollback()
        raise
    except IntegrityError as exc:
        db.session.rollback()
        if conflict_message is None:
            current_app.logger.exception(f"[{tag}] integrity error")
            raise internal_error(failure_message) from exc
        current_app.logger.info(f"[{tag}] conflict: {exc.orig}")
        raise ErrorResponse(HTTPStatus.BAD_REQUEST, conflict_message) from exc
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception(f"[{tag}] unexpected failure")
        raise internal_error(failure_message) from exc


def discard_blob(storage: Storage, path: str, tag: str) -> None:
    """Best-effort removal of a blob that is no longer referenced by any row."""
    try:
        storage.remove(path)
    except Exception:
        current_app.logger.exception(f"[{tag}] could not remove blob {path}; left orphaned")
