"""File storage port: where uploaded files end up."""

from abc import ABC, abstractmethod


class FileStorage(ABC):
    @abstractmethod
    def save(self, content: bytes, filename: str) -> str:
        """Persist ``content`` and return the public URL it is served from."""
        ...

    @abstractmethod
    def delete(self, url: str) -> bool:
        """Remove a previously saved file. Returns False if it was not there."""
        ...
