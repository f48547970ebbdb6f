"""Stay database model - one guest visit and its energy settlement."""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staybill.core.database import Base
from staybill.models.enums import SettlementMode, StayStatus

if TYPE_CHECKING:
    from staybill.models.property import Property


def _kwh_column(nullable: bool = True) -> Mapped[Decimal | None]:
    return mapped_column(Numeric(precision=12, scale=3), nullable=nullable)


class Stay(Base):
    """Guest stay with entry/exit meter readings."""

    __tablename__ = "stays"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)

    # Guest contact
    guest_name: Mapped[str] = mapped_column(String(100))
    guest_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    payment_key: Mapped[str | None] = mapped_column(String(255), nullable=True)

    check_in_date: Mapped[date] = mapped_column(index=True)
    check_out_date: Mapped[date | None] = mapped_column(nullable=True)

    settlement_mode: Mapped[SettlementMode] = mapped_column(String(20))
    status: Mapped[StayStatus] = mapped_column(String(20), index=True)

    # Raw readings
    code03_entry: Mapped[Decimal | None] = _kwh_column()
    code03_exit: Mapped[Decimal | None] = _kwh_column()
    code103_entry: Mapped[Decimal | None] = _kwh_column()
    code103_exit: Mapped[Decimal | None] = _kwh_column()
    monitoring_entry: Mapped[Decimal | None] = _kwh_column()
    monitoring_exit: Mapped[Decimal | None] = _kwh_column()

    # Settlement, written once on completion
    grid_consumption: Mapped[Decimal | None] = _kwh_column()
    grid_injection: Mapped[Decimal | None] = _kwh_column()
    solar_generation: Mapped[Decimal | None] = _kwh_column()
    self_consumption: Mapped[Decimal | None] = _kwh_column()
    total_consumption: Mapped[Decimal | None] = _kwh_column()
    tariff_used: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2))
    amount_to_charge: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=14, scale=5),
        nullable=True,
    )

    # Payment
    is_paid: Mapped[bool] = mapped_column(default=False)
    paid_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    parent_property: Mapped["Property"] = relationship(back_populates="stays")

    def has_entry_readings(self) -> bool:
        """Check that every entry reading the stay's mode needs is recorded."""
        required = [self.code03_entry, self.code103_entry]
        if self.settlement_mode == SettlementMode.MONITORING:
            required.append(self.monitoring_entry)
        return all(value is not None for value in required)

    def clear_settlement(self) -> None:
        """Drop exit readings and every derived settlement value."""
        self.check_out_date = None
        self.code03_exit = None
        self.code103_exit = None
        self.monitoring_exit = None
        self.grid_consumption = None
        self.grid_injection = None
        self.solar_generation = None
        self.self_consumption = None
        self.total_consumption = None
        self.amount_to_charge = None
