"""
Public File Routes

GET /upload/{alias}/{filename} - Serve a stored file by category alias
(profile, resume, idcard, coverletter, companydoc)

Same files as the static /uploads/{directory}/{filename} mount.
"""

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import FileResponse

from app.core.exceptions import UploadError
from app.api.routes.upload_routes import get_upload_service
from app.utils.file_upload import UploadCategory, UploadService

router = APIRouter(prefix="/upload", tags=["Files"])


@router.get("/{alias}/{filename}")
async def serve_file(alias: str, filename: str, service: UploadService = Depends(get_upload_service)):
    """Serve a stored file through its category alias."""
    try:
        path = service.resolve_path(filename, UploadCategory.parse(alias))
    except UploadError:
        raise HTTPException(status_code=404, detail="File not found")

    if not path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path)
