"""
User Models

Every person in the system (administrators, staff, guardians and students)
is a row in ``users``. Dependents point at their guardian through
``guardian_id``.
"""

from datetime import date
from enum import Enum

from sqlalchemy import Boolean, Date, ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import ENUM, JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from academy.modules.shared import AuditMixin, BaseModel


class UserRole(str, Enum):
    """User roles in the system."""

    ADMIN = "Admin"
    PARENT = "Parent"
    STUDENT = "Student"
    STAFF = "Staff"


class User(BaseModel, AuditMixin):
    """
    Person account.

    Invariants:
    - A non-null guardian_id means the account is a dependent Student and
      cannot log in directly.
    - Email is unique among accounts without a guardian (partial index);
      dependents may share their guardian's email.
    - account_id and email never change after creation.
    """

    __tablename__ = "users"

    # Human-readable identifier (APS001, APS002, ...)
    account_id: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
    )

    # Profile
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), index=True, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(30), nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    special_needs: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    specialization: Mapped[list[str]] = mapped_column(JSONB, default=list, nullable=False)
    photo_path: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Authentication
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        ENUM(UserRole, name="user_role", create_type=True),
        nullable=False,
        default=UserRole.STUDENT,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Guardianship (NULL for independent accounts)
    guardian_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    # Relationships
    guardian: Mapped["User | None"] = relationship(
        "User",
        remote_side="User.id",
        back_populates="dependents",
        lazy="raise",
    )
    dependents: Mapped[list["User"]] = relationship(
        "User",
        back_populates="guardian",
        lazy="raise",
    )

    __table_args__ = (
        Index(
            "uq_users_independent_email",
            text("lower(email)"),
            unique=True,
            postgresql_where=text("guardian_id IS NULL"),
        ),
        Index("ix_users_dependent_identity", "guardian_id", "first_name", "last_name", "dob"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, account_id={self.account_id}, role={self.role.value})>"

    @property
    def full_name(self) -> str:
        """Return user's full name."""
        return f"{self.first_name} {self.last_name}"

    @property
    def is_dependent(self) -> bool:
        return self.guardian_id is not None
