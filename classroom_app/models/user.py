from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String
from .base import Base

class User(Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    # Account-level label only; classroom authority is derived from membership
    role: Mapped[str] = mapped_column(String(20), default="student", nullable=False)
