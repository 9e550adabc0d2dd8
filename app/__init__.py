"""
Campus Referral Platform - Upload Service
File intake for the alumni/student job-referral platform.

Architecture:
- Local disk: one directory per upload category under UPLOAD_ROOT
- FastAPI: upload/delete API under /api, public file URLs under /uploads
- Callers (profile, referral, job services) keep the returned filenames
"""

__version__ = "1.0.0"
