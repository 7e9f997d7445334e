"""Banner Models"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from academy.modules.shared import AuditMixin, BaseModel


class Banner(BaseModel, AuditMixin):
    """Homepage banner slide with up to two call-to-action buttons."""

    __tablename__ = "banners"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    subtitle: Mapped[str | None] = mapped_column(Text, nullable=True)

    media_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    media_type: Mapped[str] = mapped_column(String(100), nullable=False)

    button1_text: Mapped[str | None] = mapped_column(String(100), nullable=True)
    button1_link: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    button2_text: Mapped[str | None] = mapped_column(String(100), nullable=True)
    button2_link: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # Display position, ascending
    order: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    def __repr__(self) -> str:
        return f"<Banner(id={self.id}, title={self.title}, order={self.order})>"
