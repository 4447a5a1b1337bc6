"""Storage of uploaded files under the upload directory."""

import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from config import UPLOAD_DIR, UPLOAD_URL_PREFIX
from schemas.common import FileInfo

logger = logging.getLogger(__name__)


@dataclass
class UploadedFile:
    """An uploaded file as handed to the managers by either transport."""

    filename: str
    content: bytes
    content_type: Optional[str] = None


def classify_file_type(mime_type: Optional[str], filename: Optional[str]) -> str:
    """Derive a material file type from a MIME type or file extension.

    Returns:
        One of "pdf", "video", "image", "docx", "document" or "other".
    """
    mime_type = (mime_type or "").lower()
    suffix = Path(filename or "").suffix.lower()

    if mime_type == "application/pdf" or suffix == ".pdf":
        return "pdf"
    if mime_type.startswith("video/"):
        return "video"
    if mime_type.startswith("image/"):
        return "image"
    if suffix == ".docx" or "wordprocessingml" in mime_type:
        return "docx"
    if suffix in (".doc", ".odt", ".rtf", ".txt", ".pptx", ".ppt", ".xlsx", ".xls"):
        return "document"
    if mime_type.startswith("text/") or "msword" in mime_type:
        return "document"

    # Fall back to the extension when the client sent a generic MIME type
    guessed, _ = mimetypes.guess_type(filename or "")
    if guessed and guessed != mime_type:
        return classify_file_type(guessed, None)
    return "other"


class FileStorage:
    """Writes uploads to a directory and serves them under a URL prefix."""

    def __init__(self, base_dir: Path = UPLOAD_DIR, url_prefix: str = UPLOAD_URL_PREFIX):
        self.base_dir = Path(base_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, upload: UploadedFile) -> FileInfo:
        """Store an uploaded file under a fresh name.

        Args:
            upload: The uploaded file.

        Returns:
            Metadata describing the stored file.
        """
        self.base_dir.mkdir(parents=True, exist_ok=True)
        original_name = Path(upload.filename or "upload").name
        file_name = f"{uuid.uuid4().hex}{Path(original_name).suffix.lower()}"
        (self.base_dir / file_name).write_bytes(upload.content)

        mime_type = upload.content_type or mimetypes.guess_type(original_name)[0]
        logger.info("Stored upload %s as %s (%d bytes)", original_name, file_name, len(upload.content))
        return FileInfo(
            file_name=file_name,
            original_name=original_name,
            mime_type=mime_type,
            size=len(upload.content),
            url=f"{self.url_prefix}/{file_name}",
        )

    def path_for(self, file_name: str) -> Path:
        # Stored names never contain directories
        return self.base_dir / Path(file_name).name

    def delete(self, file_name: Optional[str]) -> None:
        """Remove a stored file; missing files are ignored."""
        if not file_name:
            return
        path = self.path_for(file_name)
        if path.exists():
            path.unlink()
            logger.info("Deleted upload %s", file_name)
