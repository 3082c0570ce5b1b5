import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .config import AUTH_JWT_AUDIENCE, AUTH_JWT_SECRET
from .database import get_db
from .models import ROLE_ADMIN, ROLE_GUIDE, Guide, User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

JWT_ALGORITHM = "HS256"


def verify_access_token(token: str) -> dict:
    """
    Verify an access token issued by the auth provider.
    Tokens are HS256 JWTs signed with the project's JWT secret; the user ID is the 'sub' claim.
    """
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received: length {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    try:
        payload = jwt.decode(
            token,
            AUTH_JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=AUTH_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        logger.info("ℹ️ Expired token presented")
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid or expired token") from e

    if not payload.get("sub"):
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return payload


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer token, creating the local user row on first sight"""
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    payload = verify_access_token(credentials.credentials)
    user_id = payload["sub"]
    email = payload.get("email")

    user = db.query(User).filter(User.id == user_id).first()
    if user:
        if email and user.email != email:
            user.email = email
            db.commit()
        return user

    logger.info(f"🆕 Creating user record for {email or user_id}")
    user = User(id=user_id, email=email, role=None)
    db.add(user)
    try:
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # Another request created the same user between the lookup and the insert
        db.rollback()
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise
    return user


def require_role(*roles: str):
    """
    Create a dependency that only lets users with one of the given roles through

    Example usage:
        @router.get("/get-tourists")
        async def get_tourists(admin: User = Depends(require_role("admin"))):
            ...
    """

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.warning(
                f"⚠️ User {current_user.id} with role {current_user.role} denied (needs {roles})"
            )
            raise HTTPException(
                status_code=403, detail="You do not have permission to perform this action"
            )
        return current_user

    return role_checker


get_current_admin = require_role(ROLE_ADMIN)


async def get_current_guide(
    current_user: User = Depends(require_role(ROLE_GUIDE)),
    db: Session = Depends(get_db),
) -> Guide:
    """Resolve the guide profile of the authenticated guide user"""
    guide = db.query(Guide).filter(Guide.user_id == current_user.id).first()
    if not guide:
        raise HTTPException(status_code=404, detail="No guide profile found")
    return guide
