"""Upload validation and storage.

A file is checked against the allow-list and size ceiling of its category,
then written once under a freshly generated ``<uuid4><ext>`` name. The caller
gets back the path relative to the public serving root (``/public``).

The declared MIME type is trusted as sent by the client; no content sniffing
is performed.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath
from typing import Optional

from app.core.config import settings
from app.core.errors import MissingFile, PayloadTooLarge, UnsupportedMediaType
from app.models.evidence import EvidenceType

logger = logging.getLogger(__name__)

MB = 1024 * 1024


class UploadCategory(str, Enum):
    PROFILE_PICTURE = "profilePic"
    EVIDENCE = "evidences"


@dataclass(frozen=True)
class UploadPolicy:
    allowed_mime_types: frozenset[str]
    max_size_bytes: int


PROFILE_PICTURE_POLICY = UploadPolicy(
    allowed_mime_types=frozenset({"image/jpeg", "image/png", "image/webp"}),
    max_size_bytes=2 * MB,
)
EVIDENCE_IMAGE_POLICY = UploadPolicy(
    allowed_mime_types=frozenset({"image/jpeg", "image/png", "image/webp", "image/gif"}),
    max_size_bytes=10 * MB,
)
EVIDENCE_VIDEO_POLICY = UploadPolicy(
    allowed_mime_types=frozenset(
        {"video/mp4", "video/mpeg", "video/quicktime", "video/x-msvideo", "video/webm"}
    ),
    max_size_bytes=100 * MB,
)


@dataclass(frozen=True)
class IncomingFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class UploadedAsset:
    generated_filename: str
    original_name: str
    category: UploadCategory
    size_bytes: int
    mime_type: str
    storage_path: str


def classify_evidence(mime_type: str) -> EvidenceType:
    if mime_type.startswith("video/"):
        return EvidenceType.VIDEO
    if mime_type.startswith("image/"):
        return EvidenceType.IMAGE
    return EvidenceType.UNKNOWN


def evidence_policy(evidence_type: EvidenceType) -> UploadPolicy:
    return EVIDENCE_VIDEO_POLICY if evidence_type is EvidenceType.VIDEO else EVIDENCE_IMAGE_POLICY


def generate_filename(original_name: str) -> str:
    return f"{uuid.uuid4()}{PurePath(original_name).suffix}"


def public_relative_path(path: str, public_dir: str = "public") -> str:
    """Normalize separators to ``/`` and drop a leading ``<public_dir>/`` segment."""
    normalized = path.replace("\\", "/")
    prefix = f"{public_dir.strip('/')}/"
    if normalized.startswith(prefix):
        return normalized[len(prefix):]
    return normalized


class LocalFileStorage:
    """Filesystem adapter rooted at ``base_dir`` (``STORAGE_ROOT`` when unset)."""

    def __init__(self, base_dir: Optional[str | Path] = None):
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        return Path(self._base_dir if self._base_dir is not None else settings.storage_root)

    def mkdir_recursive(self, path: str) -> None:
        (self.base_dir / path).mkdir(parents=True, exist_ok=True)

    def write_file(self, path: str, data: bytes) -> None:
        (self.base_dir / path).write_bytes(data)

    def remove_file(self, path: str) -> None:
        (self.base_dir / path).unlink(missing_ok=True)


class UploadService:
    def __init__(self, storage: Optional[LocalFileStorage] = None, public_dir: Optional[str] = None):
        self.storage = storage or LocalFileStorage()
        self._public_dir = public_dir

    @property
    def public_dir(self) -> str:
        return self._public_dir or settings.public_dir

    def validate_and_store(
        self,
        file: Optional[IncomingFile],
        category: UploadCategory,
        policy: UploadPolicy,
    ) -> str:
        if file is None or not file.data:
            raise MissingFile()

        if policy.allowed_mime_types and file.content_type not in policy.allowed_mime_types:
            raise UnsupportedMediaType(f"Invalid file type: {file.content_type}")

        if file.size > policy.max_size_bytes:
            raise PayloadTooLarge()

        directory = os.path.join(self.public_dir, category.value)
        self.storage.mkdir_recursive(directory)

        filename = generate_filename(file.filename)
        stored_path = os.path.join(directory, filename)
        self.storage.write_file(stored_path, file.data)

        logger.debug(
            "Stored upload",
            extra={"category": category.value, "size_bytes": file.size, "mime_type": file.content_type},
        )
        return public_relative_path(stored_path, self.public_dir)

    def discard(self, public_path: str) -> None:
        """Remove a stored upload whose owning row was never committed."""
        self.storage.remove_file(os.path.join(self.public_dir, public_path))
        logger.debug("Discarded upload", extra={"storage_path": public_path})

    def store_asset(self, file: Optional[IncomingFile], category: UploadCategory, policy: UploadPolicy) -> UploadedAsset:
        storage_path = self.validate_and_store(file, category, policy)
        return UploadedAsset(
            generated_filename=PurePath(storage_path).name,
            original_name=file.filename,
            category=category,
            size_bytes=file.size,
            mime_type=file.content_type,
            storage_path=storage_path,
        )

    def store_profile_picture(self, file: Optional[IncomingFile]) -> str:
        return self.validate_and_store(file, UploadCategory.PROFILE_PICTURE, PROFILE_PICTURE_POLICY)

    def store_evidence(self, file: Optional[IncomingFile]) -> tuple[UploadedAsset, EvidenceType]:
        if file is None or not file.data:
            raise MissingFile("Evidence file is required")
        evidence_type = classify_evidence(file.content_type)
        asset = self.store_asset(file, UploadCategory.EVIDENCE, evidence_policy(evidence_type))
        return asset, evidence_type
