"""
Module: timesheet_kernel.models.user
Responsibility: ORM persistence for application users.
Architecture position: Kernel > Models.  May import from db/base.py only.

The kernel treats users as read-only reference data: it reads ``id`` and
``role``, and locks the row to serialise an owner's capacity-relevant
writes.  Credentials and sessions belong to the identity service.
"""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from timesheet_kernel.db.base import TrackedBase


class User(TrackedBase):
    """
    Application user.

    Contract:
        ``role`` holds one of "DEV", "PM", "GM", "ADMIN".
        ``status`` is "Enable" or "Disable"; the kernel does not act on it.
    """

    __tablename__ = "users"

    __table_args__ = (
        UniqueConstraint("userlogin", name="uq_user_login"),
    )

    userlogin: Mapped[str] = mapped_column(String(100), nullable=False)

    name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    email: Mapped[str | None] = mapped_column(String(200), nullable=True)

    role: Mapped[str] = mapped_column(String(10), nullable=False, default="DEV")

    status: Mapped[str] = mapped_column(String(10), nullable=False, default="Enable")

    def __repr__(self) -> str:
        return f"<User {self.userlogin}: {self.role}>"

    @property
    def display_name(self) -> str:
        return self.name or self.userlogin
