"""Property database model."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staybill.core.database import Base
from staybill.models.enums import SettlementMode

if TYPE_CHECKING:
    from staybill.models.stay import Stay
    from staybill.models.user import User


class Property(Base):
    """Rental property whose meters are read at every stay."""

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    display_name: Mapped[str] = mapped_column(String(100), index=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)

    # Billing defaults copied onto each new stay
    tariff: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2))
    settlement_mode: Mapped[SettlementMode] = mapped_column(String(20))

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
    is_active: Mapped[bool] = mapped_column(default=True)

    # Relationships
    owner: Mapped["User"] = relationship(foreign_keys=[owner_id])
    users: Mapped[list["User"]] = relationship(
        secondary="user_property_association",
        back_populates="properties",
    )
    stays: Mapped[list["Stay"]] = relationship(
        back_populates="parent_property",
        cascade="all, delete-orphan",
    )
