"""Blob storage for uploaded files (game thumbnails).

Callers only see two operations: ``upload(path_prefix, file) -> path`` and
``remove(path)``. The returned path is relative to the storage root and is
what gets persisted on the owning row.
"""
import logging
import os
import uuid
from pathlib import Path
from typing import Protocol

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class Storage(Protocol):
    def upload(self, path_prefix: str, file: FileStorage) -> str: ...

    def remove(self, path: str) -> None: ...


class LocalFileStorage:
    """Writes uploads below a root directory on the local filesystem.

    Every upload gets a fresh ``<uuid hex><ext>`` name, so re-uploading for
    the same prefix never overwrites an earlier blob.
    """

    def __init__(self, root: str) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, relative: str) -> Path:
        target = (self._root / relative).resolve()
        if not target.is_relative_to(self._root):
            raise ValueError(f"Path traversal rejected: '{relative}' resolves outside storage root")
        return target

    def upload(self, path_prefix: str, file: FileStorage) -> str:
        ext = os.path.splitext(secure_filename(file.filename or ''))[1].lower()
        relative = f"{path_prefix.strip('/')}/{uuid.uuid4().hex}{ext}"
        target = self._resolve(relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        file.save(str(target))
        logger.info("stored %s", relative)
        return relative

    def remove(self, path: str) -> None:
        # Empty per-game directories are left in place; a concurrent upload may be writing into one
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError:
            logger.warning("remove: %s already gone", path)
            return
        logger.info("removed %s", path)


def init_storage(app) -> None:
    app.extensions['storage'] = LocalFileStorage(app.config['UPLOAD_FOLDER'])


def get_storage() -> Storage:
    return current_app.extensions['storage']
