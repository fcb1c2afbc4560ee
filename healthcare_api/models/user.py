"""User model definitions."""

from sqlalchemy import Column, Integer, JSON, String
from healthcare_api.database import Base

USER_ROLE = "User"
ADMIN_ROLE = "Admin"


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    roles = Column(JSON, nullable=False, default=lambda: [USER_ROLE])

    def has_role(self, role: str) -> bool:
        return role in (self.roles or [])
