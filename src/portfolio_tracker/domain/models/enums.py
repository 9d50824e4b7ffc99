"""Enumerations for domain models."""

from enum import Enum


class TransactionType(str, Enum):
    """Types of ledger transactions."""

    BUY = "BUY"
    SELL = "SELL"


class AssetType(str, Enum):
    """Well-known asset classification tags (transactions may carry any tag)."""

    EQUITY = "EQUITY"
    CEDEAR = "CEDEAR"
    FUTURE = "FUTURE"
    FUND = "FUND"
    CASH = "CASH"


class OversellPolicy(str, Enum):
    """What the realized-P&L replay does with a sell larger than the holding."""

    SKIP = "SKIP"  # skip only when nothing is held; otherwise sell the full quantity
    CLAMP = "CLAMP"  # sell at most the held quantity
    REJECT = "REJECT"  # raise InsufficientSharesError
