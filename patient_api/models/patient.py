from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Patient(Base):
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    doctor: Mapped[str] = mapped_column(Text, nullable=False)
    # NULL means no prescription on file; "" is a stored value
    prescription: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
