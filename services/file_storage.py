"""
File Storage Service

Stores uploaded tender and bidder documents on local disk and builds the
public URL they are served from.

Layout:
- {data_dir}/documents/
    - tenders/{tender_id}/{timestamp}-{uuid}-{safe name}
    - bidders/{bidder_id}/{timestamp}-{uuid}-{safe name}
"""

import re
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from config.settings import settings
from config.logging_config import get_logger

logger = get_logger("files")

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def safe_filename(filename: str) -> str:
    """Replace everything but letters, digits, dots and dashes with ``_``."""
    return _UNSAFE_CHARS.sub("_", filename or "file")


def unique_path(filename: str, folder: str) -> str:
    """Relative storage path that never collides with an earlier upload."""
    timestamp = int(time.time() * 1000)
    return f"{folder}/{timestamp}-{uuid.uuid4()}-{safe_filename(filename)}"


@dataclass(frozen=True)
class StoredFile:
    path: str
    url: str
    size: int


class FileStorage:
    """Local-disk document store."""

    def __init__(self, root: Optional[Path] = None, public_url: Optional[str] = None):
        self.root = Path(root) if root else settings.documents_dir
        self.public_url = (public_url or settings.public_files_url).rstrip("/")

    def _resolve(self, path: str) -> Path:
        resolved = (self.root / path).resolve()
        if not resolved.is_relative_to(self.root.resolve()):
            raise ValueError(f"Path escapes storage root: {path}")
        return resolved

    def url_for(self, path: str) -> str:
        return f"{self.public_url}/{path}"

    def save(self, content: bytes, filename: str, folder: str) -> StoredFile:
        """
        Write an upload under ``folder``.

        Args:
            content: File bytes
            filename: Name supplied by the client
            folder: Logical folder, e.g. ``bidders/<id>``

        Returns:
            Relative path, public URL and size of the stored file
        """
        path = unique_path(filename, folder)
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)

        logger.info(f"Stored {len(content)} bytes at {path}")
        return StoredFile(path=path, url=self.url_for(path), size=len(content))

    def read(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()

    def delete(self, path: Optional[str]) -> bool:
        """Remove a stored file. Missing files are not an error."""
        if not path:
            return False
        target = self._resolve(path)
        if not target.exists():
            logger.warning(f"File already gone: {path}")
            return False
        target.unlink()
        logger.info(f"Deleted {path}")
        return True


def get_file_storage() -> FileStorage:
    """FastAPI dependency returning the configured file store."""
    return FileStorage()
