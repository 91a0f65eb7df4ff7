"""Runtime configuration defaults for persistence, settlement, logging and printing."""

from __future__ import annotations

import os

from pos_register.settlement import SettlementPolicy, UnresolvedPolicy

DB_PATH = os.environ.get("POS_DB_PATH", "data/register.db")
# Seconds a settlement waits for the inventory write lock before failing.
DB_TIMEOUT_SECONDS = float(os.environ.get("POS_DB_TIMEOUT_SECONDS", "5"))

LOG_PATH = os.environ.get("POS_LOG_PATH", "/tmp/pos-register.log")
LOG_LEVEL = os.environ.get("POS_LOG_LEVEL", "INFO")

UNRESOLVED_POLICY_ENV = "POS_UNRESOLVED_POLICY"
ALLOW_NEGATIVE_STOCK_ENV = "POS_ALLOW_NEGATIVE_STOCK"

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 8
PRINTER_TAIL_SPACER_PX = 70


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


def settlement_policy() -> SettlementPolicy:
    """Build the settlement policy from the environment.

    Defaults: unknown order components abort the settlement and stock may not
    go below zero.
    """
    raw = os.environ.get(UNRESOLVED_POLICY_ENV, UnresolvedPolicy.FAIL_FAST.value).strip().lower()
    try:
        unresolved = UnresolvedPolicy(raw)
    except ValueError:
        choices = ", ".join(policy.value for policy in UnresolvedPolicy)
        raise ValueError(f"{UNRESOLVED_POLICY_ENV} must be one of: {choices} (got {raw!r})") from None
    return SettlementPolicy(unresolved=unresolved, allow_negative_stock=_env_flag(ALLOW_NEGATIVE_STOCK_ENV))
