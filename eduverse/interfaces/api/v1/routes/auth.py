from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from eduverse.application.services.security_service import authenticate_user, create_access_token
from eduverse.infrastructure.db.session import get_db
from eduverse.infrastructure.logging import get_logger
from eduverse.interfaces.api.v1.schemas.auth import TokenResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/token",
    response_model=TokenResponse,
    summary="Issue access token",
    description=(
        "Authenticate with OAuth2 password form data (`username` is the email) and return a bearer token "
        "plus the caller's id and role so clients can pick the right dashboard."
    ),
    responses={401: {"description": "Invalid credentials or inactive account"}},
)
def issue_token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = authenticate_user(db=db, email=form_data.username, password=form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info("token_issued", user_id=user.id, role=user.role)
    return TokenResponse(access_token=create_access_token(user.id), user_id=user.id, role=user.role)
