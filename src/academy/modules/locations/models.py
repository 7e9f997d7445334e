"""Location Models"""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from academy.modules.shared import AuditMixin, BaseModel


class Location(BaseModel, AuditMixin):
    """
    Venue where classes and events run.

    ``rooms`` lists the room names classes and events may book.
    """

    __tablename__ = "locations"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address_line1: Mapped[str] = mapped_column(String(255), nullable=False)
    address_line2: Mapped[str | None] = mapped_column(String(255), nullable=True)
    suburb: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(
        String(100), default="Australia", server_default="Australia", nullable=False
    )
    postcode: Mapped[str] = mapped_column(String(20), nullable=False)
    rooms: Mapped[list[str]] = mapped_column(JSONB, default=list, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, name={self.name})>"

    def has_room(self, room: str) -> bool:
        return room in (self.rooms or [])
