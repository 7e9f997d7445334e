"""Course Models"""

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from academy.modules.shared import AuditMixin, BaseModel


class Course(BaseModel, AuditMixin):
    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    category_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("course_categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    # Free text, e.g. "5-8 years"
    age_range: Mapped[str | None] = mapped_column(String(50), nullable=True)
    media_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    media_type: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, title={self.title})>"
