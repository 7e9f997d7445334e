"""Course Category Models"""

from sqlalchemy import Boolean, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from academy.modules.shared import AuditMixin, BaseModel


class CourseCategory(BaseModel, AuditMixin):
    """Category shared by courses and events. Names are unique ignoring case."""

    __tablename__ = "course_categories"

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("uq_course_categories_name", text("lower(name)"), unique=True),
    )

    def __repr__(self) -> str:
        return f"<CourseCategory(id={self.id}, name={self.name})>"
