import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from busticket.models import User
from busticket.users.schemas import UserCreate

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User with this email or phone already exists"

class UserService:
    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_contact(db: Session, email: str, phone: str) -> Optional[User]:
        """Get a user matching either the email or the phone number"""
        return db.query(User).filter(or_(User.email == email, User.phone == phone)).first()

    @staticmethod
    def create_user(db: Session, user: UserCreate) -> User:
        """Register a new rider; email and phone must both be unused"""
        phone = user.phone.strip()
        if UserService.get_user_by_contact(db, user.email, phone):
            raise ValueError(DUPLICATE_USER_MESSAGE)

        db_user = User(
            name=user.name.strip(),
            email=user.email,
            phone=phone,
            wallet_balance=0,
            total_bookings=0
        )

        try:
            db.add(db_user)
            db.commit()
            db.refresh(db_user)
        except IntegrityError:
            # Lost a race with a concurrent registration
            db.rollback()
            raise ValueError(DUPLICATE_USER_MESSAGE)

        logger.info("Registered user %s", db_user.id)
        return db_user
