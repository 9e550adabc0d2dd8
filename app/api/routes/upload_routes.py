"""
Upload Routes

POST /uploads/{category} - Upload one file (field name = category)
DELETE /uploads/{category}/{filename} - Delete a stored file
GET /uploads/formats - Get accepted types and size limit
GET /uploads/{category}/files - List stored files (admin)

Categories: profilePhoto, resume, idCard, coverLetter, companyDocument
"""

from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from app.core.auth import get_current_user, require_role
from app.utils.file_upload import UploadCategory, UploadService
from app.schemas.schemas import (
    UploadResponse, StoredFileInfo, StoredFileListResponse, MessageResponse, ErrorResponse, UserRole
)

router = APIRouter(prefix="/uploads", tags=["Uploads"])

# Bodies produced by the UploadError handler in app.main
UPLOAD_ERRORS = {
    400: {"model": ErrorResponse, "description": "Rejected upload"},
    413: {"model": ErrorResponse, "description": "File too large"},
    500: {"model": ErrorResponse, "description": "File storage failed"},
}


def get_upload_service(request: Request) -> UploadService:
    """Dependency - the upload service configured in app.main.create_app."""
    return request.app.state.upload_service


@router.get("/formats")
async def upload_formats(service: UploadService = Depends(get_upload_service)):
    """Get accepted file types per category and the size limit."""
    return service.describe_constraints()


@router.post("/{category}", response_model=UploadResponse, status_code=201, responses=UPLOAD_ERRORS)
async def upload_file(
    category: str,
    request: Request,
    user: dict = Depends(get_current_user),
    service: UploadService = Depends(get_upload_service),
):
    """
    Upload a single file for a category.

    The multipart field name must equal the category, e.g. `resume`.
    Images for profilePhoto/idCard, PDF/DOC/DOCX for the rest (max 5MB).
    The returned filename is what callers store on their own records.
    """
    upload_category = UploadCategory.parse(category)

    form = await request.form()
    try:
        files = [
            item
            for name in upload_category.field_names
            for item in form.getlist(name)
            if isinstance(item, UploadFile)
        ]
        stored = await run_in_threadpool(service.accept_form_files, upload_category, files)
    finally:
        await form.close()

    return UploadResponse(
        message=f"{upload_category.value} uploaded successfully",
        filename=stored.filename,
        category=upload_category.value,
        url=service.build_access_url(stored.filename, upload_category),
        alias_url=service.build_access_url(stored.filename, upload_category, alias=True),
        size=stored.size,
    )


@router.delete("/{category}/{filename}", response_model=MessageResponse, responses={400: UPLOAD_ERRORS[400]})
async def delete_file(
    category: str,
    filename: str,
    user: dict = Depends(get_current_user),
    service: UploadService = Depends(get_upload_service),
):
    """Delete a stored file, e.g. when a profile photo is replaced."""
    if not service.delete(filename, category):
        raise HTTPException(status_code=404, detail="File not found")
    return MessageResponse(message="File deleted")


@router.get("/{category}/files", response_model=StoredFileListResponse)
async def list_files(
    category: str,
    admin: dict = Depends(require_role(UserRole.admin.value)),
    service: UploadService = Depends(get_upload_service),
):
    """List files stored for a category. Admins only."""
    upload_category = UploadCategory.parse(category)
    filenames = service.list_stored_files(upload_category)

    return StoredFileListResponse(
        category=upload_category.value,
        directory=upload_category.directory,
        files=[
            StoredFileInfo(
                filename=name,
                url=service.build_access_url(name, upload_category),
                alias_url=service.build_access_url(name, upload_category, alias=True),
            ) for name in filenames
        ],
        total=len(filenames),
    )
