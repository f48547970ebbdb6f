"""Energy settlement calculation for a guest stay.

Turns the meter readings taken at check-in and check-out into the energy a
guest consumed and the amount owed for it. Two modes are supported:

    simple:      total = grid_consumption + grid_injection
    monitoring:  self_consumption = solar_generation - grid_injection
                 total = self_consumption + grid_consumption

In both modes ``charge = total * tariff``. Values keep full ``Decimal``
precision; rounding happens only when a result is rendered.
"""

import logging
import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, computed_field

from staybill.models.enums import SettlementMode

logger = logging.getLogger(__name__)

KWH_QUANTUM = Decimal("0.1")
CURRENCY_QUANTUM = Decimal("0.01")
DISPLAY_DATE_FORMAT = "%d/%m/%Y"

# Readings are stored as Numeric(12, 3)
MAX_INTEGER_DIGITS = 9
_PLAIN_NUMBER = re.compile(r"-?\d+(?:[.,]\d+)?", re.ASCII)

# Register code 03 is grid import, register code 103 is grid export
SIMPLE_READING_FIELDS = ("code03_entry", "code03_exit", "code103_entry", "code103_exit")
MONITORING_READING_FIELDS = (*SIMPLE_READING_FIELDS, "monitoring_entry", "monitoring_exit")


class SettlementError(ValueError):
    """Base class for user-correctable settlement input errors."""

    kind = "settlement_error"
    default_message = "Invalid settlement input"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingFieldError(SettlementError):
    kind = "missing_field"
    default_message = "All required fields must be filled"


class UnparseableNumberError(SettlementError):
    kind = "unparseable_number"
    default_message = "All required fields must be filled with valid numbers"


class InvalidDateError(SettlementError):
    kind = "invalid_date"
    default_message = "Dates must be valid calendar dates"


class InvalidDateRangeError(SettlementError):
    kind = "invalid_date_range"
    default_message = "Exit date must be after entry date"


class NegativeDeltaError(SettlementError):
    kind = "negative_delta"
    default_message = "Exit reading must exceed entry reading"


class NegativeSelfConsumptionError(SettlementError):
    kind = "negative_self_consumption"
    default_message = "Solar generation must exceed grid injection"


class InvalidTariffError(SettlementError):
    kind = "invalid_tariff"
    default_message = "Tariff must be a positive number"


class InvalidModeError(SettlementError):
    kind = "invalid_mode"
    default_message = "Settlement mode must be 'simple' or 'monitoring'"


class MeterReadings(BaseModel):
    """Raw entry/exit readings as typed into a form."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    code03_entry: str | None = None
    code03_exit: str | None = None
    code103_entry: str | None = None
    code103_exit: str | None = None
    monitoring_entry: str | None = None
    monitoring_exit: str | None = None

    def has_monitoring(self) -> bool:
        """Check whether any generation monitor reading was supplied."""
        return not (_is_blank(self.monitoring_entry) and _is_blank(self.monitoring_exit))


class SettlementInput(BaseModel):
    """Everything needed to settle one stay."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    check_in: date | str | None = None
    check_out: date | str | None = None
    mode: SettlementMode | str | None = None
    readings: MeterReadings = MeterReadings()
    tariff: str | None = None


class SettlementResult(BaseModel):
    """Consumption and charge for one stay.

    In simple mode ``grid_injection`` is the net solar export and the
    generation/self-consumption components are ``None``.
    """

    model_config = ConfigDict(frozen=True)

    mode: SettlementMode
    check_in: date
    check_out: date
    days: int
    grid_consumption: Decimal
    grid_injection: Decimal
    solar_generation: Decimal | None = None
    self_consumption: Decimal | None = None
    total_consumption: Decimal
    tariff: Decimal
    charge: Decimal

    @computed_field  # type: ignore[prop-decorator]
    @property
    def check_in_display(self) -> str:
        return self.check_in.strftime(DISPLAY_DATE_FORMAT)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def check_out_display(self) -> str:
        return self.check_out.strftime(DISPLAY_DATE_FORMAT)


def round_kwh(value: Decimal) -> Decimal:
    """Round an energy value for display (1 decimal)."""
    return value.quantize(KWH_QUANTUM, rounding=ROUND_HALF_UP)


def round_currency(value: Decimal) -> Decimal:
    """Round a monetary value for display (2 decimals)."""
    return value.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def _is_blank(raw: object) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def parse_decimal(raw: object) -> Decimal:
    """Parse a form number, accepting ',' or '.' as the fractional separator.

    Only plain digits are accepted: no exponents, digit separators or
    special values, and at most ``MAX_INTEGER_DIGITS`` before the separator.
    """
    if _is_blank(raw):
        raise MissingFieldError()
    text = str(raw).strip()
    if not _PLAIN_NUMBER.fullmatch(text):
        raise UnparseableNumberError()
    value = Decimal(text.replace(",", "."))
    if value != 0 and value.adjusted() >= MAX_INTEGER_DIGITS:
        raise UnparseableNumberError(
            f"Numbers must have at most {MAX_INTEGER_DIGITS} integer digits"
        )
    return value


def parse_tariff(raw: object) -> Decimal:
    """Parse a tariff such as ``"1.10"`` or ``"1,10"``."""
    tariff = parse_decimal(raw)
    if tariff <= 0:
        raise InvalidTariffError()
    return tariff


def parse_reading(raw: object) -> Decimal:
    """Parse a cumulative meter reading in kWh."""
    value = parse_decimal(raw)
    if value < 0:
        raise UnparseableNumberError("Readings must be non-negative numbers")
    return value


def parse_date(raw: date | str | None) -> date:
    """Parse an ISO calendar date (``YYYY-MM-DD``)."""
    if isinstance(raw, date):
        return raw
    if _is_blank(raw):
        raise MissingFieldError()
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise InvalidDateError() from exc


def stay_length_days(check_in: date, check_out: date) -> int:
    """Number of nights between two calendar dates; same-day stays are rejected."""
    days = (check_out - check_in).days
    if days <= 0:
        raise InvalidDateRangeError()
    return days


def meter_delta(entry: Decimal, exit_value: Decimal) -> Decimal:
    """Energy registered between two cumulative readings."""
    delta = exit_value - entry
    if delta < 0:
        raise NegativeDeltaError()
    return delta


def resolve_mode(mode: SettlementMode | str | None, readings: MeterReadings) -> SettlementMode:
    """Pick the settlement mode, inferring it from the readings when not given."""
    if _is_blank(mode):
        if readings.has_monitoring():
            return SettlementMode.MONITORING
        return SettlementMode.SIMPLE
    try:
        return SettlementMode(mode)
    except ValueError as exc:
        raise InvalidModeError() from exc


def required_reading_fields(mode: SettlementMode) -> tuple[str, ...]:
    """Reading names a mode cannot be computed without."""
    if mode == SettlementMode.MONITORING:
        return MONITORING_READING_FIELDS
    return SIMPLE_READING_FIELDS


def calculate_settlement(data: SettlementInput) -> SettlementResult:
    """Validate the input and compute the settlement for one stay.

    Every required field is checked for presence before any value is parsed,
    and every value is parsed before any arithmetic.

    Raises:
        SettlementError: One of its subclasses, describing the first problem found.
    """
    mode = resolve_mode(data.mode, data.readings)
    fields = required_reading_fields(mode)

    raw_readings = {name: getattr(data.readings, name) for name in fields}
    if any(_is_blank(raw) for raw in (data.check_in, data.check_out, data.tariff)) or any(
        _is_blank(raw) for raw in raw_readings.values()
    ):
        raise MissingFieldError()

    check_in = parse_date(data.check_in)
    check_out = parse_date(data.check_out)
    readings = {name: parse_reading(raw) for name, raw in raw_readings.items()}
    tariff = parse_tariff(data.tariff)

    days = stay_length_days(check_in, check_out)

    grid_consumption = meter_delta(readings["code03_entry"], readings["code03_exit"])
    grid_injection = meter_delta(readings["code103_entry"], readings["code103_exit"])

    solar_generation: Decimal | None = None
    self_consumption: Decimal | None = None

    if mode == SettlementMode.MONITORING:
        solar_generation = meter_delta(readings["monitoring_entry"], readings["monitoring_exit"])
        self_consumption = solar_generation - grid_injection
        if self_consumption < 0:
            raise NegativeSelfConsumptionError()
        total_consumption = self_consumption + grid_consumption
    else:
        # Without a generation monitor the net export is billed as if consumed on site
        total_consumption = grid_consumption + grid_injection

    charge = total_consumption * tariff

    logger.debug(
        "Settled %s stay of %d days: %s kWh at %s = %s",
        mode.value,
        days,
        total_consumption,
        tariff,
        charge,
    )

    return SettlementResult(
        mode=mode,
        check_in=check_in,
        check_out=check_out,
        days=days,
        grid_consumption=grid_consumption,
        grid_injection=grid_injection,
        solar_generation=solar_generation,
        self_consumption=self_consumption,
        total_consumption=total_consumption,
        tariff=tariff,
        charge=charge,
    )
