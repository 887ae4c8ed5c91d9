from sqlalchemy import String, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from camwatch.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from camwatch.models.role_assignment import RoleAssignment
    from camwatch.models.profile import Profile


class Principal(Base, TimestampMixin):
    """
    Authenticated identity.

    Holds sign-in credentials only; authorization lives in role assignments.
    Principals are created by the provisioning flow, never by self sign-up.
    """

    __tablename__ = "principals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    role_assignments: Mapped[list["RoleAssignment"]] = relationship(
        "RoleAssignment",
        back_populates="principal",
        cascade="all, delete-orphan",  # Assignments go with their principal
    )
    profile: Mapped["Profile | None"] = relationship(
        "Profile", back_populates="principal", cascade="all, delete-orphan", uselist=False
    )

    def __repr__(self) -> str:
        return f"<Principal(id={self.id}, email='{self.email}')>"
