"""Local-disk storage, served by the API under ``/uploads``."""

import re
from pathlib import Path
from uuid import uuid4

import structlog

from storefront.storage.port import FileStorage

logger = structlog.get_logger(__name__)

URL_PREFIX = "/uploads/"

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: str) -> str:
    """Basename only, with anything outside ``[A-Za-z0-9._-]`` collapsed to ``_``."""
    name = Path((filename or "").replace("\\", "/")).name
    name = _UNSAFE.sub("_", name).strip("._")
    return name or "upload"


class LocalFileStorage(FileStorage):
    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def save(self, content: bytes, filename: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)

        stored_name = f"{uuid4()}_{sanitize_filename(filename)}"
        (self.directory / stored_name).write_bytes(content)

        logger.info("file_stored", filename=stored_name, size=len(content))
        return f"{URL_PREFIX}{stored_name}"

    def delete(self, url: str) -> bool:
        if not url or not url.startswith(URL_PREFIX):
            return False

        path = self.directory / sanitize_filename(url[len(URL_PREFIX) :])
        if not path.is_file():
            return False

        path.unlink()
        logger.info("file_deleted", filename=path.name)
        return True
