"""
File Upload Utility - validate, store and serve uploaded files by category.

Categories and their accepted types:
- profilePhoto, idCard: JPEG, JPG, PNG, WebP images
- resume, coverLetter, companyDocument: PDF, DOC, DOCX documents

Max file size: 5MB (MAX_FILE_SIZE), one file per request.

Stored names look like `resume-1700000000000-123456789.pdf` and live in
`<upload_root>/<category directory>/`. The service does not track who owns a
file; callers keep the returned filename on their own records.
"""

import logging
import os
import random
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Dict, FrozenSet, List, Optional, Sequence, Union

from app.core.config import DEFAULT_MAX_FILE_SIZE, Settings
from app.core.exceptions import UploadError, UploadErrorKind

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
MAX_EXTENSION_LENGTH = 16

IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})
DOCUMENT_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
})


class UploadCategory(str, Enum):
    """Upload purpose. The value doubles as the multipart field name."""

    profile_photo = "profilePhoto"
    resume = "resume"
    id_card = "idCard"
    cover_letter = "coverLetter"
    company_document = "companyDocument"

    @property
    def directory(self) -> str:
        return _LAYOUT[self][0]

    @property
    def alias(self) -> str:
        """Segment of the public `/upload/<alias>/<filename>` URL."""
        return _LAYOUT[self][1]

    @property
    def constraint(self) -> "UploadConstraint":
        return CATEGORY_CONSTRAINTS[self]

    @property
    def field_names(self) -> List[str]:
        """Multipart field names a file for this category may arrive under."""
        return [self.value] + [name for name, category in _LEGACY_FIELDS.items() if category is self]

    @classmethod
    def parse(cls, value: Union["UploadCategory", str, None]) -> "UploadCategory":
        """Resolve a field name, directory name or public alias to a category."""
        if isinstance(value, cls):
            return value
        key = (value or "").strip()
        for category in cls:
            if key in (category.value, category.directory, category.alias):
                return category
        if key in _LEGACY_FIELDS:
            return _LEGACY_FIELDS[key]
        raise UploadError(
            UploadErrorKind.invalid_category,
            f"Unknown upload category '{value}'.",
        )


@dataclass(frozen=True)
class UploadConstraint:
    allowed_types: FrozenSet[str]
    type_error: str
    max_files: int = 1


@dataclass(frozen=True)
class StoredFile:
    filename: str
    category: UploadCategory
    path: Path
    size: int
    content_type: str

    @property
    def directory(self) -> str:
        return self.category.directory

    @property
    def relative_path(self) -> str:
        return f"{self.category.directory}/{self.filename}"


_LAYOUT = {
    UploadCategory.profile_photo: ("profiles", "profile"),
    UploadCategory.resume: ("resumes", "resume"),
    UploadCategory.id_card: ("idcards", "idcard"),
    UploadCategory.cover_letter: ("coverletters", "coverletter"),
    UploadCategory.company_document: ("companydoc", "companydoc"),
}

# Field name used by the older registration form
_LEGACY_FIELDS = {"bracuIdCard": UploadCategory.id_card}

_DOCUMENT_ERROR = "Only PDF, DOC, and DOCX files are allowed for documents."

CATEGORY_CONSTRAINTS: Dict[UploadCategory, UploadConstraint] = {
    UploadCategory.profile_photo: UploadConstraint(
        IMAGE_TYPES,
        "Only JPEG, JPG, PNG, and WebP images are allowed for profile photos.",
    ),
    UploadCategory.id_card: UploadConstraint(
        IMAGE_TYPES,
        "Only JPEG, JPG, PNG, and WebP images are allowed for ID cards.",
    ),
    UploadCategory.resume: UploadConstraint(DOCUMENT_TYPES, _DOCUMENT_ERROR),
    UploadCategory.cover_letter: UploadConstraint(DOCUMENT_TYPES, _DOCUMENT_ERROR),
    UploadCategory.company_document: UploadConstraint(DOCUMENT_TYPES, _DOCUMENT_ERROR),
}


def normalize_content_type(content_type: Optional[str]) -> str:
    """Strip parameters such as `; charset=...` and lowercase."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def get_file_extension(filename: Optional[str]) -> str:
    """
    Original extension including the dot, or '' when there is none.

    Raises:
        UploadError(InvalidFilename) for control characters or an
        extension longer than MAX_EXTENSION_LENGTH
    """
    if not filename:
        return ""
    name = os.path.basename(filename.replace("\\", "/"))
    extension = os.path.splitext(name)[1]
    if len(extension) > MAX_EXTENSION_LENGTH or any(
        ord(char) < 32 or ord(char) == 127 for char in extension
    ):
        raise UploadError(
            UploadErrorKind.invalid_filename,
            f"Invalid file extension in {name[:64]!r}.",
        )
    return extension


def generate_filename(category: UploadCategory, original_filename: Optional[str]) -> str:
    """`<category>-<unix millis>-<random 0..999999999><.ext>`"""
    millis = int(time.time() * 1000)
    suffix = random.randint(0, 999_999_999)
    return f"{category.value}-{millis}-{suffix}{get_file_extension(original_filename)}"


def delete_stored_file(path: Union[str, Path, None]) -> bool:
    """
    Remove a stored file if it exists.

    Returns True when a file was removed. A missing or empty path is a no-op.
    """
    if not path:
        return False
    target = Path(path)
    if not target.is_file():
        return False
    try:
        target.unlink()
    except FileNotFoundError:
        # Removed by someone else between the check and the unlink
        return False
    logger.info("Deleted stored file %s", target)
    return True


def _measure(stream: BinaryIO) -> Optional[int]:
    """Remaining bytes in a seekable stream, or None if it can't seek."""
    try:
        position = stream.tell()
        stream.seek(0, os.SEEK_END)
        size = stream.tell() - position
        stream.seek(position)
    except (AttributeError, OSError, ValueError):
        return None
    return size


def _format_megabytes(size: int) -> str:
    return f"{size / (1024 * 1024):g}MB"


class UploadService:
    """
    Stateless write-once store keyed by generated filename.

    Usage:
        service = UploadService("uploads")
        stored = service.accept_upload("resume", fh, content_type="application/pdf",
                                       filename="cv.pdf")
        url = service.build_access_url(stored.filename, stored.category)
    """

    def __init__(
        self,
        upload_root: Union[str, Path],
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        base_url: str = "http://localhost:5000",
    ):
        self.upload_root = Path(upload_root).absolute()
        self.max_file_size = max_file_size
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadService":
        return cls(
            upload_root=settings.upload_root,
            max_file_size=settings.max_file_size,
            base_url=settings.public_base_url,
        )

    def ensure_root(self) -> Path:
        try:
            self.upload_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.exception("Could not create upload root %s", self.upload_root)
            raise UploadError(
                UploadErrorKind.filesystem_error,
                f"Could not create upload directory: {e}",
            ) from e
        return self.upload_root

    def category_dir(self, category: Union[UploadCategory, str]) -> Path:
        return self.upload_root / UploadCategory.parse(category).directory

    # ------------------------------------------------------------------
    # Intake
    # ------------------------------------------------------------------

    def accept_form_files(self, category: Union[UploadCategory, str], files: Sequence) -> StoredFile:
        """
        Accept the files a multipart request carried under the category field.

        `files` items are Starlette/FastAPI UploadFile objects.
        """
        upload_category = UploadCategory.parse(category)
        if not files:
            raise UploadError(UploadErrorKind.missing_file, "No file uploaded.")
        if len(files) > upload_category.constraint.max_files:
            raise UploadError(
                UploadErrorKind.too_many_files,
                "Too many files. Only one file allowed.",
            )

        upload = files[0]
        return self.accept_upload(
            upload_category,
            upload.file,
            content_type=upload.content_type,
            filename=upload.filename,
            size=getattr(upload, "size", None),
        )

    def accept_upload(
        self,
        category: Union[UploadCategory, str],
        stream: BinaryIO,
        *,
        content_type: Optional[str],
        filename: Optional[str],
        size: Optional[int] = None,
    ) -> StoredFile:
        """
        Validate and store one file.

        Checks run in order (category, type, size, extension) and all of them pass
        before anything is written.

        Raises:
            UploadError on rejection or storage failure
        """
        upload_category = UploadCategory.parse(category)
        constraint = upload_category.constraint

        mime = normalize_content_type(content_type)
        if mime not in constraint.allowed_types:
            logger.warning("Rejected %s upload with type '%s'", upload_category.value, mime)
            raise UploadError(UploadErrorKind.unsupported_type, constraint.type_error)

        if size is None:
            size = _measure(stream)
        if size is not None and size > self.max_file_size:
            raise self._too_large(upload_category, size)

        # The extension ends up in the stored name
        get_file_extension(filename)

        directory = self.upload_root / upload_category.directory
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.exception("Could not create upload directory %s", directory)
            raise UploadError(
                UploadErrorKind.filesystem_error,
                f"Could not create upload directory: {e}",
            ) from e

        stored_name = generate_filename(upload_category, filename)
        destination = directory / stored_name
        written = self._write(upload_category, stream, destination)

        logger.info(
            "Stored %s upload %s (%d bytes, original name %r)",
            upload_category.value, stored_name, written, filename,
        )
        return StoredFile(
            filename=stored_name,
            category=upload_category,
            path=destination,
            size=written,
            content_type=mime,
        )

    def _write(self, category: UploadCategory, stream: BinaryIO, destination: Path) -> int:
        try:
            # Exclusive create: a name collision must never overwrite a stored file
            out = open(destination, "xb")
        except OSError as e:
            logger.exception("Could not open %s for writing", destination)
            raise UploadError(
                UploadErrorKind.filesystem_error,
                f"Could not store file: {e}",
            ) from e

        written = 0
        try:
            with out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_file_size:
                        raise self._too_large(category, written)
                    out.write(chunk)
        except OSError as e:
            delete_stored_file(destination)
            logger.exception("Write failed for %s, partial file removed", destination)
            raise UploadError(
                UploadErrorKind.filesystem_error,
                f"Could not store file: {e}",
            ) from e
        except Exception:
            delete_stored_file(destination)
            raise
        return written

    def _too_large(self, category: UploadCategory, size: int) -> UploadError:
        logger.warning(
            "Rejected %s upload of %d bytes (limit %d)",
            category.value, size, self.max_file_size,
        )
        return UploadError(
            UploadErrorKind.too_large,
            f"File too large. Maximum size is {_format_megabytes(self.max_file_size)}.",
        )

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def build_access_url(
        self,
        filename: Optional[str],
        category: Union[UploadCategory, str],
        *,
        alias: bool = False,
    ) -> Optional[str]:
        """Public URL for a stored file. Does not check that it still exists."""
        if not filename:
            return None
        upload_category = UploadCategory.parse(category)
        if alias:
            return f"{self.base_url}/upload/{upload_category.alias}/{filename}"
        return f"{self.base_url}/uploads/{upload_category.directory}/{filename}"

    def resolve_path(self, filename: str, category: Union[UploadCategory, str]) -> Path:
        """Path of a stored file. Rejects names that would leave the category dir."""
        if (
            not filename
            or filename in (".", "..")
            or "/" in filename
            or "\\" in filename
            or "\x00" in filename
        ):
            raise UploadError(UploadErrorKind.invalid_filename, f"Invalid filename '{filename}'.")
        return self.category_dir(category) / filename

    def delete(self, filename: str, category: Union[UploadCategory, str]) -> bool:
        return delete_stored_file(self.resolve_path(filename, category))

    def list_stored_files(self, category: Union[UploadCategory, str]) -> List[str]:
        directory = self.category_dir(category)
        if not directory.is_dir():
            return []
        return sorted(entry.name for entry in directory.iterdir() if entry.is_file())

    def describe_constraints(self) -> dict:
        """Info about accepted uploads, per category."""
        return {
            "categories": [
                {
                    "category": category.value,
                    "directory": category.directory,
                    "alias": category.alias,
                    "allowed_types": sorted(category.constraint.allowed_types),
                    "max_files": category.constraint.max_files,
                }
                for category in UploadCategory
            ],
            "max_size_bytes": self.max_file_size,
            "max_size_mb": round(self.max_file_size / (1024 * 1024), 2),
        }
