import pytest

from app.core.errors import MissingFile, PayloadTooLarge, UnsupportedMediaType
from app.models.evidence import EvidenceType
from app.services.uploads import (
    EVIDENCE_IMAGE_POLICY,
    EVIDENCE_VIDEO_POLICY,
    PROFILE_PICTURE_POLICY,
    IncomingFile,
    LocalFileStorage,
    UploadCategory,
    UploadPolicy,
    UploadService,
    classify_evidence,
    public_relative_path,
)

SMALL_POLICY = UploadPolicy(allowed_mime_types=frozenset({"image/png"}), max_size_bytes=16)


@pytest.fixture
def uploads(tmp_path):
    return UploadService(storage=LocalFileStorage(tmp_path))


def png(size: int, name: str = "photo.png") -> IncomingFile:
    return IncomingFile(filename=name, content_type="image/png", data=b"x" * size)


def test_file_at_exact_ceiling_is_accepted(uploads, tmp_path):
    path = uploads.validate_and_store(png(16), UploadCategory.PROFILE_PICTURE, SMALL_POLICY)

    assert path.startswith("profilePic/")
    assert path.endswith(".png")
    assert (tmp_path / "public" / path).stat().st_size == 16


def test_file_over_ceiling_is_rejected(uploads, tmp_path):
    with pytest.raises(PayloadTooLarge) as exc_info:
        uploads.validate_and_store(png(17), UploadCategory.PROFILE_PICTURE, SMALL_POLICY)
    assert exc_info.value.status_code == 413
    assert not (tmp_path / "public").exists()


def test_mime_type_outside_allow_list_is_rejected(uploads):
    gif = IncomingFile(filename="anim.gif", content_type="image/gif", data=b"GIF89a")
    with pytest.raises(UnsupportedMediaType) as exc_info:
        uploads.validate_and_store(gif, UploadCategory.PROFILE_PICTURE, PROFILE_PICTURE_POLICY)
    assert exc_info.value.status_code == 415


def test_missing_or_empty_file_is_rejected(uploads):
    with pytest.raises(MissingFile):
        uploads.validate_and_store(None, UploadCategory.EVIDENCE, EVIDENCE_IMAGE_POLICY)
    with pytest.raises(MissingFile):
        uploads.validate_and_store(png(0), UploadCategory.EVIDENCE, EVIDENCE_IMAGE_POLICY)


def test_empty_allow_list_accepts_any_type(uploads):
    open_policy = UploadPolicy(allowed_mime_types=frozenset(), max_size_bytes=1024)
    pdf = IncomingFile(filename="notes.pdf", content_type="application/pdf", data=b"%PDF-1.4")
    assert uploads.validate_and_store(pdf, UploadCategory.EVIDENCE, open_policy).endswith(".pdf")


def test_generated_names_never_collide(uploads, tmp_path):
    paths = {
        uploads.validate_and_store(png(8, name="same.png"), UploadCategory.EVIDENCE, EVIDENCE_IMAGE_POLICY)
        for _ in range(50)
    }
    assert len(paths) == 50
    assert len(list((tmp_path / "public" / "evidences").iterdir())) == 50


def test_store_asset_describes_the_upload(uploads):
    asset = uploads.store_asset(png(10, name="cv.png"), UploadCategory.PROFILE_PICTURE, PROFILE_PICTURE_POLICY)

    assert asset.original_name == "cv.png"
    assert asset.size_bytes == 10
    assert asset.mime_type == "image/png"
    assert asset.category is UploadCategory.PROFILE_PICTURE
    assert asset.storage_path == f"profilePic/{asset.generated_filename}"


def test_store_evidence_picks_policy_by_media_kind(uploads):
    video = IncomingFile(filename="demo.mp4", content_type="video/mp4", data=b"\x00" * 32)
    asset, evidence_type = uploads.store_evidence(video)
    assert evidence_type is EvidenceType.VIDEO
    assert asset.storage_path.startswith("evidences/")

    pdf = IncomingFile(filename="notes.pdf", content_type="application/pdf", data=b"%PDF")
    with pytest.raises(UnsupportedMediaType):
        uploads.store_evidence(pdf)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("public\\evidences\\a.png", "evidences/a.png"),
        ("public/profilePic/b.jpg", "profilePic/b.jpg"),
        ("evidences/c.webm", "evidences/c.webm"),
    ],
)
def test_public_relative_path(raw, expected):
    assert public_relative_path(raw) == expected


def test_classify_evidence():
    assert classify_evidence("image/webp") is EvidenceType.IMAGE
    assert classify_evidence("video/quicktime") is EvidenceType.VIDEO
    assert classify_evidence("application/zip") is EvidenceType.UNKNOWN


def test_category_ceilings():
    assert PROFILE_PICTURE_POLICY.max_size_bytes == 2 * 1024 * 1024
    assert EVIDENCE_IMAGE_POLICY.max_size_bytes == 10 * 1024 * 1024
    assert EVIDENCE_VIDEO_POLICY.max_size_bytes == 100 * 1024 * 1024


def test_discard_removes_stored_file(uploads, tmp_path):
    stored = uploads.validate_and_store(png(8), UploadCategory.EVIDENCE, SMALL_POLICY)
    assert (tmp_path / "public" / stored).exists()

    uploads.discard(stored)
    uploads.discard(stored)
    assert not (tmp_path / "public" / stored).exists()
