from fastapi import APIRouter, Depends, status

from utils.get_current_user_cognito import TokenData, get_current_user

from .deps import get_upload_service
from .schemas import CompleteReq, PresignReq
from .service import UploadService

router = APIRouter(tags=["Uploads"])


@router.post("/presign")
def presign(
    req: PresignReq,
    current_user: TokenData = Depends(get_current_user),
    service: UploadService = Depends(get_upload_service),
):
    return service.issue_upload_target(current_user.sub, req.filename, req.content_type, req.size)


@router.post("/complete", status_code=status.HTTP_202_ACCEPTED)
def complete(
    req: CompleteReq,
    current_user: TokenData = Depends(get_current_user),
    service: UploadService = Depends(get_upload_service),
):
    return service.mark_processing(current_user.sub, req.upload_id, req.s3_key)


@router.get("/uploads/{upload_id}")
def get_upload(
    upload_id: str,
    current_user: TokenData = Depends(get_current_user),
    service: UploadService = Depends(get_upload_service),
):
    return service.get_upload(current_user.sub, upload_id)
