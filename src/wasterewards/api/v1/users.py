"""User registration endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import UserCreate, UserRead
from ...services import user_service
from ...services.errors import RewardRuleViolation

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
def register_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
) -> UserRead:
    """Create a user, or return the existing one for the same email.

    Example request body::

        {
            "email": "asha.verma@gmail.com",
            "name": "Asha Verma"
        }
    """

    try:
        user = user_service.register_user(db, email=payload.email, name=payload.name)
        db.commit()
        db.refresh(user)
        return user
    except RewardRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
