"""Tests for image validation and local file storage."""

import pytest
from protean.exceptions import ValidationError

from storefront.storage.images import detect_image_type, store_image, validate_image
from storefront.storage.local import LocalFileStorage, sanitize_filename

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * 16


class TestImageValidation:
    @pytest.mark.parametrize(
        "content, content_type",
        [
            (PNG, "image/png"),
            (JPEG, "image/jpeg"),
            (b"GIF89a" + b"\x00" * 8, "image/gif"),
            (b"RIFF" + b"\x00" * 8 + b"WEBP", "image/webp"),
        ],
    )
    def test_detects_signatures(self, content, content_type):
        assert detect_image_type(content) == content_type
        assert validate_image(content) == content_type

    def test_empty_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_image(b"")
        assert "Image.Empty" in exc.value.messages

    def test_too_large_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_image(PNG + b"\x00" * (1024 * 1024), max_bytes=1024 * 1024)
        assert "Image.TooLarge" in exc.value.messages

    def test_disguised_file_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_image(b"<?php echo 'hi'; ?>")
        assert "Image.InvalidType" in exc.value.messages


class TestLocalFileStorage:
    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("photo.png", "photo.png"),
            ("../../etc/passwd", "passwd"),
            ("C:\\Users\\me\\my photo.png", "my_photo.png"),
            ("", "upload"),
            ("...", "upload"),
        ],
    )
    def test_sanitize_filename(self, filename, expected):
        assert sanitize_filename(filename) == expected

    def test_save_and_delete(self, tmp_path):
        storage = LocalFileStorage(tmp_path)

        url = storage.save(PNG, "photo.png")

        assert url.startswith("/uploads/")
        assert url.endswith("_photo.png")
        stored = tmp_path / url.removeprefix("/uploads/")
        assert stored.read_bytes() == PNG

        assert storage.delete(url)
        assert not stored.exists()
        assert not storage.delete(url)

    def test_delete_ignores_foreign_urls(self, tmp_path):
        assert not LocalFileStorage(tmp_path).delete("https://cdn.example.com/a.png")

    def test_store_image_uses_active_storage(self, storage):
        result = store_image(JPEG, "shot.jpg")

        assert result["content_type"] == "image/jpeg"
        assert result["size"] == len(JPEG)
        assert (storage.directory / result["url"].removeprefix("/uploads/")).exists()
