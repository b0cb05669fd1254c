"""
Receipt Image Storage

DESIGN DECISION: Receipts are kept as plain files in one local
directory. A record only holds an opaque reference (the file name),
so the ledger never carries image bytes and the store can change
without touching saved records.

The reference is derived from the image content, so uploading the
same receipt twice reuses one file.
"""

import hashlib
from pathlib import Path
from typing import Optional

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from smart_budget.services.storage.interface import StorageError


logger = structlog.get_logger(__name__)

ALLOWED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp")
MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024


class AttachmentError(StorageError):
    """Receipt image could not be stored or found."""
    pass


class LocalAttachmentStore:
    """Stores receipt images in a local directory."""

    def __init__(self, directory: str):
        self._directory = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def _make_ref(self, data: bytes, filename: str) -> str:
        extension = Path(filename).suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise AttachmentError(
                f"Unsupported receipt type '{extension or filename}'. "
                f"Use one of: {', '.join(ALLOWED_EXTENSIONS)}"
            )
        content_hash = hashlib.sha256(data).hexdigest()[:16]
        return f"receipt_{content_hash}{extension}"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write(self, path: Path, data: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def save(self, data: bytes, filename: str) -> str:
        """Store an image and return its reference."""
        if not data:
            raise AttachmentError("Receipt image is empty")
        if len(data) > MAX_ATTACHMENT_BYTES:
            raise AttachmentError("Receipt image is larger than 10 MB")

        ref = self._make_ref(data, filename)
        path = self._directory / ref
        if path.exists():
            return ref
        try:
            self._write(path, data)
        except OSError as e:
            raise AttachmentError(f"Failed to store receipt: {e}")

        logger.info("attachment_saved", ref=ref, size=len(data))
        return ref

    def path_for(self, ref: str) -> Optional[Path]:
        """Resolve a reference to a file, or None if it is gone."""
        # References are bare file names; anything else never leaves the directory
        if not ref or Path(ref).name != ref:
            return None
        path = self._directory / ref
        return path if path.is_file() else None

