"""
Media Upload Signing

Resumes and posting PDFs are uploaded by the browser straight to Cloudinary
(api.cloudinary.com/v1_1/<cloud>/raw/upload). The API only signs the upload
parameters; Cloudinary returns a URL which the client stores verbatim on the
profile (resume) or posting (pdfLinks).

Signing is delegated to the Cloudinary SDK (SHA-1 over the sorted params
plus the api secret).
"""

import logging
import time
from typing import Dict, Optional

from cloudinary.utils import api_sign_request

from careerhub.core.config import Settings, get_settings
from careerhub.core.errors import ServiceUnavailableError, ValidationError

logger = logging.getLogger(__name__)


def compute_signature(params: Dict[str, object], api_secret: str) -> str:
    """Sign a parameter dict. Empty values are left out of the string to sign."""
    return api_sign_request(params, api_secret)


def sign_upload(folder: str, settings: Optional[Settings] = None, timestamp: Optional[int] = None) -> dict:
    """
    Build signed parameters for one direct upload.

    Raises:
        ValidationError: folder is not in the configured allow-list
        ServiceUnavailableError: media credentials are not configured
    """
    settings = settings or get_settings()

    if folder not in settings.media_folder_list:
        raise ValidationError(f"Folder '{folder}' is not allowed", error_code="INVALID_FOLDER")

    if not (settings.media_cloud_name and settings.media_api_key and settings.media_api_secret):
        logger.error("Media upload requested but media credentials are not configured")
        raise ServiceUnavailableError("Media uploads are not configured")

    timestamp = timestamp if timestamp is not None else int(time.time())
    signature = compute_signature({"folder": folder, "timestamp": timestamp}, settings.media_api_secret)

    return {
        "signature": signature,
        "timestamp": timestamp,
        "api_key": settings.media_api_key,
        "folder": folder,
        "cloud_name": settings.media_cloud_name,
    }
