from fastapi import APIRouter, Depends

from utils.RoleChecker import require_operator
from utils.get_current_user_cognito import TokenData

from .auth_service import AuthService
from .deps import get_auth_service
from .schemas import ResetPasswordReq, SignInReq, SignUpReq, StoreUserReq, VerifyOtpReq

router = APIRouter(tags=["Auth"])


@router.post("/auth")
def sign_in(req: SignInReq, service: AuthService = Depends(get_auth_service)):
    return service.sign_in(req)


@router.post("/signup")
def signup(req: SignUpReq, service: AuthService = Depends(get_auth_service)):
    return service.sign_up(req)


@router.post("/verify-otp")
def verify_otp(req: VerifyOtpReq, service: AuthService = Depends(get_auth_service)):
    return service.verify_otp(req)


@router.post("/reset-password")
def reset_password(req: ResetPasswordReq, service: AuthService = Depends(get_auth_service)):
    return service.reset_password(req)


@router.post("/store-user")
def store_user(
    req: StoreUserReq,
    _operator: TokenData = Depends(require_operator),
    service: AuthService = Depends(get_auth_service),
):
    return service.store_user(req)
