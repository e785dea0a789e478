import logging
import time
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

from fastapi import UploadFile

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads"
CHUNK_SIZE = 1024 * 1024


class UploadStorage(Protocol):
    """Where uploaded images live. References are opaque file names."""

    async def store(self, file: UploadFile) -> str: ...

    async def replace(self, old_ref: str | None, file: UploadFile) -> str: ...

    def delete(self, ref: str | None) -> None: ...

    def resolve(self, ref: str) -> Path: ...


def public_url(ref: str) -> str:
    return f"{UPLOADS_URL_PREFIX}/{quote(ref)}"


def generate_name(original: str | None, now: float | None = None) -> str:
    base = Path((original or "").replace("\\", "/")).name
    if base in {"", ".", ".."}:
        base = "upload"
    millis = int((time.time() if now is None else now) * 1000)
    return f"{millis}-{base}"


class LocalUploadStorage:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def resolve(self, ref: str) -> Path:
        root = self.root.resolve()
        path = (root / ref).resolve()
        if path.parent != root:
            raise ValueError(f"Invalid upload reference: {ref!r}")
        return path

    async def store(self, file: UploadFile) -> str:
        root = self.ensure_root()
        ref = generate_name(file.filename)
        final_path = root / ref

        total = 0
        try:
            with final_path.open("wb") as handle:
                while True:
                    chunk = await file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    total += len(chunk)
                    handle.write(chunk)
        except OSError:
            final_path.unlink(missing_ok=True)
            raise
        finally:
            await file.close()
        logger.info("upload_stored", extra={"ref": ref, "size": total})
        return ref

    async def replace(self, old_ref: str | None, file: UploadFile) -> str:
        new_ref = await self.store(file)
        if old_ref and old_ref != new_ref:
            self.delete(old_ref)
        return new_ref

    def delete(self, ref: str | None) -> None:
        if not ref:
            return
        path = self.resolve(ref)
        if path.exists():
            path.unlink(missing_ok=True)
            logger.info("upload_deleted", extra={"ref": ref})
