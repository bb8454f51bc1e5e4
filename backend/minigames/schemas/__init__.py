"""Request schemas and per-type ``game_json`` payload models.

``game_json`` is a tagged union whose tag is the game template slug; look
payloads up through :func:`load_game_payload` instead of indexing the raw
dict.
"""
from typing import Dict, Iterable, Type

from flask import request
from pydantic import BaseModel

from minigames.schemas.flip_tiles import FlipTilesPayload

GAME_PAYLOADS: Dict[str, Type[BaseModel]] = {
    'flip-tiles': FlipTilesPayload,
}


def load_game_payload(slug: str, game_json) -> BaseModel:
    try:
        model = GAME_PAYLOADS[slug]
    except KeyError:
        raise ValueError(f'No payload model registered for game type {slug!r}')
    return model.model_validate(game_json or {})


def parse_body(schema: Type[BaseModel], file_fields: Iterable[str] = ()) -> BaseModel:
    """Validate the current request body against ``schema``.

    Multipart/urlencoded forms are read field by field with uploaded files
    merged in; anything else is treated as a JSON object. Raises pydantic's
    ``ValidationError``, which the app renders as a 400.
    """
    if request.mimetype in ('multipart/form-data', 'application/x-www-form-urlencoded'):
        data = request.form.to_dict()
        for name in file_fields:
            upload = request.files.get(name)
            if upload is not None and upload.filename:
                data[name] = upload
    else:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            data = {}
        # A JSON body cannot carry files
        for name in file_fields:
            data.pop(name, None)
    return schema.model_validate(data)
