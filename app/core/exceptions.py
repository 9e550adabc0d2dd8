"""
Upload errors - structured rejections raised by the upload intake service.

The service never builds HTTP responses itself. The API layer maps
`UploadError.status_code` to a response in app.main.
"""

from enum import Enum


class UploadErrorKind(str, Enum):
    invalid_category = "InvalidCategory"
    unsupported_type = "UnsupportedType"
    too_large = "TooLarge"
    too_many_files = "TooManyFiles"
    missing_file = "MissingFile"
    invalid_filename = "InvalidFilename"
    filesystem_error = "FilesystemError"


_STATUS_CODES = {
    UploadErrorKind.invalid_category: 400,
    UploadErrorKind.unsupported_type: 400,
    UploadErrorKind.too_large: 413,
    UploadErrorKind.too_many_files: 400,
    UploadErrorKind.missing_file: 400,
    UploadErrorKind.invalid_filename: 400,
    UploadErrorKind.filesystem_error: 500,
}


class UploadError(Exception):
    """Raised when an upload is rejected or cannot be stored."""

    def __init__(self, kind: UploadErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"{kind.value}: {message}")

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    @property
    def is_client_error(self) -> bool:
        """False only for storage failures, which are not the caller's fault."""
        return self.kind is not UploadErrorKind.filesystem_error
