from enum import Enum

from sqlalchemy import Column, String
from sqlalchemy.types import Enum as SAEnum

from models.base_model import Base, BaseModel


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(BaseModel, Base):
    __tablename__ = "users"

    # Case-sensitive as stored; login matches the exact string
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        SAEnum(Role, name="user_role", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.USER,
    )

    @property
    def role_name(self) -> str:
        """Role as a plain string, for token claims and JSON payloads."""
        return self.role.value if isinstance(self.role, Role) else str(self.role)
