from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from fuelai.core.database import get_db
from fuelai.core.security import verify_access_token
from fuelai.models.user import User
from fuelai.schemas.user import User as UserSchema
from fuelai.services.user_service import UserService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

async def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    authorization: str = request.headers.get("Authorization")

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
            headers={"WWW-Authenticate": "Bearer"}
        )

    auth_parts = authorization.split()
    if len(auth_parts) != 2:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"}
        )

    scheme, token = auth_parts
    if scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication scheme",
            headers={"WWW-Authenticate": "Bearer"}
        )

    token_data = await verify_access_token(token)
    payload = token_data["payload"]

    try:
        return UserService(db).get_or_create_user(
            token_data["subject"],
            email=payload.get("email"),
            name=payload.get("name")
        )
    except Exception as e:
        # Log unexpected errors but don't expose details
        logger.error(f"Unexpected authentication error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
            headers={"WWW-Authenticate": "Bearer"}
        )

@router.get("/me", response_model=UserSchema)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user
