"""Account router - FastAPI endpoints for the signed-in user"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import DeleteAccountRequest, MeResponse
from .service import AccountService

router = APIRouter(tags=["Account"])


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


@router.get("/me", response_model=MeResponse)
async def get_me(
    current_user: User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    """Current user, role and whether the role profile exists"""
    return service.get_me(current_user)


@router.post("/delete-account")
async def delete_account(
    data: DeleteAccountRequest,
    current_user: User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    """Permanently delete the current account and its data"""
    return await service.delete_account(current_user)


__all__ = ["router"]
