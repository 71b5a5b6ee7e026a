"""Resume upload storage."""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from fastapi import UploadFile

from .errors import UploadRejected

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".pdf", ".doc", ".docx")
CHUNK_SIZE = 64 * 1024


class UploadStore:
    """Writes uploaded documents under ``root/<category>/`` and returns URL paths."""

    def __init__(self, root: str, max_bytes: int, url_prefix: str = "/uploads") -> None:
        self.root = Path(root)
        self.max_bytes = max_bytes
        self.url_prefix = url_prefix.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def save(self, upload: UploadFile | None, category: str, field: str = "resume") -> str:
        if upload is None or not upload.filename:
            raise UploadRejected("No file uploaded")
        ext = os.path.splitext(upload.filename)[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise UploadRejected("Only PDF, DOC, and DOCX files are allowed")

        target_dir = self.root / category
        target_dir.mkdir(parents=True, exist_ok=True)
        name = f"{field}-{uuid.uuid4().hex}{ext}"
        target = target_dir / name

        written = 0
        with target.open("wb") as out:
            while chunk := upload.file.read(CHUNK_SIZE):
                written += len(chunk)
                if written > self.max_bytes:
                    break
                out.write(chunk)
        if written > self.max_bytes:
            target.unlink(missing_ok=True)
            raise UploadRejected(
                f"File too large (limit {self.max_bytes} bytes)",
                reason="file_too_large",
            )

        logger.info("file stored", extra={"category": category, "bytes": written})
        return f"{self.url_prefix}/{category}/{name}"
