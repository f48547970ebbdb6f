"""Enum definitions for stays and settlements."""

from enum import Enum


class SettlementMode(str, Enum):
    """Which meter readings feed the settlement."""

    SIMPLE = "simple"  # Grid import + grid export only
    MONITORING = "monitoring"  # Grid import + grid export + generation monitor


class StayStatus(str, Enum):
    """Lifecycle of a guest stay."""

    PENDING_ENTRY = "pending_entry"
    IN_PROGRESS = "in_progress"  # Entry readings recorded
    COMPLETED = "completed"  # Exit readings recorded, settlement computed
    PAID = "paid"  # Terminal


class PaymentKeyPolicy(str, Enum):
    """Where the payment key echoed into guest messages comes from."""

    STAY_FIRST = "stay_first"  # Per-stay key, falling back to the owner profile
    STAY_ONLY = "stay_only"
    PROFILE_ONLY = "profile_only"
