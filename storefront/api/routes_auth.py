import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_db
from storefront.core.config import settings
from storefront.core.errors import InvalidInput, Unauthenticated
from storefront.db.models import User
from storefront.schemas import LoginPayload, LoginResponse, LoginUser
from storefront.security.utils import create_access_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()  # main.py mounts at the root

COOKIE_NAME = "access_token"


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginPayload, response: Response, db: Session = Depends(get_db)) -> LoginResponse:
    if not payload.email or not payload.password:
        raise InvalidInput("Please fill all fields")

    user = db.query(User).filter(User.email == payload.email.strip().lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise Unauthenticated("Invalid email or password")

    token, _ = create_access_token(user.id, user.email, user.role)
    response.set_cookie(
        COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
        max_age=settings.ACCESS_TOKEN_EXPIRES_SECONDS,
    )
    logger.info("user logged in: %s", user.email)
    return LoginResponse(message="Login successful", user=LoginUser.model_validate(user), token=token)


@router.post("/logout")
def logout(response: Response) -> dict:
    response.delete_cookie(COOKIE_NAME, httponly=True, secure=settings.COOKIE_SECURE, samesite="strict")
    return {"message": "Logout successful"}
