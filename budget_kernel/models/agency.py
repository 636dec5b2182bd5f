"""ORM persistence for Agencies, the organizational owners of Programs."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import RecordedBase
from budget_kernel.domain.values import CODE_MAX_LENGTH, NAME_MAX_LENGTH, TEXT_MAX_LENGTH


class Agency(RecordedBase):
    """
    An organizational owner of Programs, independent of any Fund.

    Guarantees:
        - code is unique among Agencies (uq_agency_code).
    """

    __tablename__ = "agencies"

    __table_args__ = (
        UniqueConstraint("code", name="uq_agency_code"),
    )

    code: Mapped[str] = mapped_column(String(CODE_MAX_LENGTH), nullable=False)

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    description: Mapped[str | None] = mapped_column(
        String(TEXT_MAX_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Agency {self.code}: {self.name}>"
