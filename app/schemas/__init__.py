"""
Schemas module - Response schemas for API endpoints.
"""

from app.schemas.schemas import (
    UserRole, UploadResponse, StoredFileInfo, StoredFileListResponse,
    MessageResponse, ErrorResponse,
)

__all__ = [
    "UserRole",
    "UploadResponse",
    "StoredFileInfo",
    "StoredFileListResponse",
    "MessageResponse",
    "ErrorResponse",
]
