"""
Pydantic Schemas - Request/Response Validation

All API response schemas in one file for simplicity.
"""

from pydantic import BaseModel
from typing import Optional, List
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    alumni = "alumni"
    recruiter = "recruiter"
    admin = "admin"


# ============================================================
# UPLOAD SCHEMAS
# ============================================================

class UploadResponse(BaseModel):
    success: bool = True
    message: str
    filename: str
    category: str
    url: str
    alias_url: str
    size: int

class StoredFileInfo(BaseModel):
    filename: str
    url: str
    alias_url: str

class StoredFileListResponse(BaseModel):
    category: str
    directory: str
    files: List[StoredFileInfo] = []
    total: int = 0


# ============================================================
# COMMON SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    success: bool = False
    error: Optional[str] = None
    message: str
