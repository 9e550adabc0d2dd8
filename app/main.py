"""
Campus Referral Platform - Upload Service

FastAPI backend for files attached to profiles, referrals and applications:
- Profile photos and ID cards (images)
- Resumes, cover letters and company documents (PDF/DOC/DOCX)
- Public file URLs under /uploads and /upload/<alias>

Run: uvicorn app.main:app --reload --port 5000
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.routes import api_router, file_router
from app.core.config import Settings, get_settings
from app.core.exceptions import UploadError
from app.core.logging_config import setup_logging
from app.utils.file_upload import UploadService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application for the given settings (defaults to env config)."""
    settings = settings or get_settings()
    upload_service = UploadService.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        upload_service.ensure_root()
        logger.info(
            "Upload service ready: root=%s, max size=%d bytes, public url=%s",
            upload_service.upload_root, upload_service.max_file_size, upload_service.base_url,
        )
        yield

    app = FastAPI(
        title="Campus Referral Platform - Uploads",
        description="""
        File intake for the alumni/student referral platform.

        ## Categories
        - **profilePhoto**, **idCard**: JPEG, JPG, PNG, WebP
        - **resume**, **coverLetter**, **companyDocument**: PDF, DOC, DOCX

        One file per request, 5MB max by default (MAX_FILE_SIZE).
        """,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.upload_service = upload_service

    # CORS middleware (allow all for development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(UploadError)
    async def upload_error_handler(request: Request, exc: UploadError):
        if exc.is_client_error:
            logger.warning("Upload rejected on %s: %s", request.url.path, exc)
            message = exc.message
        else:
            # Details were logged where the failure happened
            message = "File storage failed."
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.kind.value, "message": message},
        )

    # Include API routes
    app.include_router(api_router, prefix="/api")
    app.include_router(file_router)

    # Stored files, e.g. /uploads/resumes/resume-1700000000000-42.pdf
    app.mount(
        "/uploads",
        StaticFiles(directory=upload_service.upload_root, check_dir=False),
        name="uploads",
    )

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check."""
        root = upload_service.upload_root
        return {
            "status": "healthy",
            "upload_root": str(root),
            "writable": root.is_dir() and os.access(root, os.W_OK),
            "environment": settings.environment,
        }

    return app


app = create_app()
