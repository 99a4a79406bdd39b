"""Image upload validation by size and magic bytes."""

from storefront import config
from storefront.shared.errors import ImageErrors
from storefront.storage import get_storage

SIGNATURES = {
    "image/png": b"\x89PNG",
    "image/jpeg": b"\xff\xd8\xff",
    "image/gif": b"GIF8",
    "image/webp": b"RIFF",
}


def detect_image_type(content: bytes) -> str | None:
    """Content type whose signature ``content`` starts with, if any."""
    for content_type, signature in SIGNATURES.items():
        if content.startswith(signature):
            return content_type
    return None


def validate_image(content: bytes | None, max_bytes: int | None = None) -> str:
    limit = max_bytes or config.MAX_UPLOAD_BYTES
    if not content:
        raise ImageErrors.EMPTY.to_exception()
    if len(content) > limit:
        raise ImageErrors.too_large(limit).to_exception()

    content_type = detect_image_type(content)
    if content_type is None:
        raise ImageErrors.INVALID_TYPE.to_exception()
    return content_type


def store_image(content: bytes | None, filename: str) -> dict:
    content_type = validate_image(content)
    url = get_storage().save(content, filename)
    return {"url": url, "content_type": content_type, "size": len(content)}
