from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from database.database import Base


class User(Base):
    """Comptes utilisateurs ; jamais modifiés après l'inscription."""

    __tablename__ = "users"

    id:              Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username:        Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email:           Mapped[str | None] = mapped_column(String(255), nullable=True)
    # HMAC-SHA256 hex, jamais le mot de passe en clair
    password_digest: Mapped[str] = mapped_column(String(64), nullable=False)
