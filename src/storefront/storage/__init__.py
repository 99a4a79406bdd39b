"""File storage registry.

Defaults to ``LocalFileStorage`` rooted at ``UPLOAD_DIR``; tests point it at a
temporary directory with ``set_storage()``.
"""

from storefront import config
from storefront.storage.local import LocalFileStorage
from storefront.storage.port import FileStorage

_current_storage: FileStorage | None = None


def get_storage() -> FileStorage:
    global _current_storage
    if _current_storage is None:
        _current_storage = LocalFileStorage(config.UPLOAD_DIR)
    return _current_storage


def set_storage(storage: FileStorage) -> None:
    global _current_storage
    _current_storage = storage


def reset_storage() -> None:
    global _current_storage
    _current_storage = None
