"""
Media Routes

POST /media/sign - Signed parameters for a direct upload to the media host
"""

from fastapi import APIRouter, Depends

from careerhub.core.auth import Principal, get_current_user
from careerhub.schemas.schemas import UploadSignatureRequest, UploadSignatureResponse
from careerhub.services.media import sign_upload

router = APIRouter(prefix="/media", tags=["Media"])


@router.post("/sign", response_model=UploadSignatureResponse)
async def sign_media_upload(request: UploadSignatureRequest, user: Principal = Depends(get_current_user)):
    """
    Sign an upload. The browser posts the file to the media host with these
    parameters and stores the returned URL on the profile or posting.
    """
    return UploadSignatureResponse(**sign_upload(request.folder))
