from __future__ import annotations

import asyncio
import logging
import re
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4

logger = logging.getLogger(__name__)

# Stored file urls start with this marker; the same tree is served at /uploads.
LOCAL_URL_PREFIX = "uploads/"
PUBLIC_MOUNT_PATH = "/uploads"

_FILENAME_SAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")
_MAX_NAME_LENGTH = 120


def backend_root() -> Path:
    # backend/catalog/services/object_store.py -> backend/
    return Path(__file__).resolve().parents[2]


def sanitize_filename(name: str) -> str:
    # Strip paths and normalize whitespace/special chars.
    base = (name or "").split("/")[-1].split("\\")[-1].strip()
    base = _FILENAME_SAFE_RE.sub("_", base)
    base = base.strip("._-")
    if not base:
        return "file"
    return base[-_MAX_NAME_LENGTH:]


def is_local_url(url: str) -> bool:
    return (url or "").startswith(LOCAL_URL_PREFIX)


@dataclass(frozen=True)
class CleanupResult:
    url: str
    removed: bool
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class LocalObjectStore:
    """
    Directory-backed storage for uploaded binaries.

    Objects are addressed by the relative url returned from `save`
    ("uploads/<key>"). Keys carry a millisecond timestamp plus a random
    component and are created exclusively, so a save never overwrites an
    existing object.
    """

    def __init__(self, root: str | Path) -> None:
        p = Path(root)
        if not p.is_absolute():
            p = backend_root() / p
        self.root = p.resolve()

    def ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def make_key(self, filename: str) -> str:
        millis = int(time.time() * 1000)
        return f"{millis}-{uuid4().hex[:8]}-{sanitize_filename(filename)}"

    def path_for(self, url: str) -> Path | None:
        """Absolute path for a stored url, or None if it is not inside the store."""
        if not is_local_url(url):
            return None
        rel = url[len(LOCAL_URL_PREFIX):]
        if not rel:
            return None
        candidate = (self.root / rel).resolve()
        if candidate == self.root or self.root not in candidate.parents:
            return None
        return candidate

    def _write(self, stream: BinaryIO, path: Path) -> None:
        self.ensure_root()
        with open(path, "xb") as out:
            shutil.copyfileobj(stream, out)

    async def save(self, stream: BinaryIO, filename: str) -> str:
        key = self.make_key(filename)
        path = self.root / key
        await asyncio.to_thread(self._write, stream, path)
        logger.info("Stored upload %s (%s)", key, filename)
        return f"{LOCAL_URL_PREFIX}{key}"

    async def delete(self, url: str) -> CleanupResult:
        path = self.path_for(url)
        if path is None:
            return CleanupResult(url=url, removed=False, error="Not a path inside the upload directory")

        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return CleanupResult(url=url, removed=False)
        except OSError as e:
            return CleanupResult(url=url, removed=False, error=str(e))
        return CleanupResult(url=url, removed=True)
