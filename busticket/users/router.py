from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from busticket.database import get_db
from busticket.users.schemas import UserCreate, UserContact, RegistrationResponse
from busticket.users.service import UserService

router = APIRouter()

@router.post("/register", response_model=RegistrationResponse)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """Register a new rider"""
    try:
        db_user = UserService.create_user(db=db, user=user)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return RegistrationResponse(
        user_id=db_user.id,
        user=UserContact.model_validate(db_user)
    )
