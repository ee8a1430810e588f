from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
from fuelai.models.user import User

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user_by_subject(self, auth_subject: str) -> Optional[User]:
        return self.db.query(User).filter(User.auth_subject == auth_subject).first()

    def get_or_create_user(self, auth_subject: str, email: Optional[str] = None, name: Optional[str] = None) -> User:
        """Users are created the first time the auth collaborator vouches for them."""
        user = self.get_user_by_subject(auth_subject)
        if user:
            return user

        user = User(auth_subject=auth_subject, email=email, name=name)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent first request for the same subject
            self.db.rollback()
            return self.get_user_by_subject(auth_subject)

        self.db.refresh(user)
        return user
