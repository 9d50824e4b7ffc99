"""Cost-basis ledger: chronological replay for realized gains."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

from portfolio_tracker.core.exceptions import InsufficientSharesError
from portfolio_tracker.domain.models import ExchangeRates, OversellPolicy, Transaction
from portfolio_tracker.domain.views import ClosedTrade, RealizedGains

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def sort_chronologically(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Order by trade timestamp; equal timestamps keep their input order."""
    return sorted(transactions, key=lambda txn: txn.traded_at)


@dataclass
class Holding:
    """Running open quantity and its cost in the base currency."""

    quantity: Decimal = field(default_factory=lambda: Decimal("0"))
    total_cost_in_base: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def average_cost(self) -> Decimal:
        """Point-in-time weighted average cost of the units held right now."""
        if self.quantity <= ZERO:
            return ZERO
        return self.total_cost_in_base / self.quantity


class CostBasisLedger:
    """
    Replays transactions in date order with weighted-average costing.

    Each sell is matched against the average cost of the holding at that moment,
    and the holding's quantity and cost shrink by the sold units. Holdings are
    rebuilt from scratch on every replay and never outlive it.
    """

    def __init__(
        self,
        rates: ExchangeRates,
        oversell_policy: OversellPolicy = OversellPolicy.SKIP,
    ):
        self._rates = rates
        self._oversell_policy = OversellPolicy(oversell_policy)

    def replay(self, transactions: Iterable[Transaction]) -> RealizedGains:
        """Return win/loss statistics for every sell counted during the replay."""
        _, closed = self._run(transactions)
        return self._summarize(closed)

    def holdings(self, transactions: Iterable[Transaction]) -> dict[str, Holding]:
        """Holdings left at the end of the replay, keyed by ticker."""
        holdings, _ = self._run(transactions)
        return dict(holdings)

    def _run(
        self, transactions: Iterable[Transaction]
    ) -> tuple[dict[str, Holding], list[ClosedTrade]]:
        holdings: dict[str, Holding] = defaultdict(Holding)
        closed: list[ClosedTrade] = []

        for txn in sort_chronologically(transactions):
            holding = holdings[txn.ticker]
            if txn.is_buy:
                self._apply_buy(holding, txn)
            elif txn.is_sell:
                trade = self._apply_sell(holding, txn)
                if trade is not None:
                    closed.append(trade)

        return holdings, closed

    def _apply_buy(self, holding: Holding, txn: Transaction) -> None:
        holding.total_cost_in_base += self._rates.to_base(
            txn.quantity * txn.price + txn.fee, txn.currency
        )
        holding.quantity += txn.quantity

    def _apply_sell(self, holding: Holding, txn: Transaction) -> Optional[ClosedTrade]:
        sell_quantity = self._sell_quantity(holding, txn)
        if sell_quantity is None:
            logger.debug(
                "Skipping sell of %s %s on %s: nothing held",
                txn.quantity, txn.ticker, txn.traded_at,
            )
            return None

        cost_of_sold = sell_quantity * holding.average_cost
        proceeds = self._rates.to_base(sell_quantity * txn.price - txn.fee, txn.currency)

        holding.quantity -= sell_quantity
        holding.total_cost_in_base -= cost_of_sold

        return ClosedTrade(
            ticker=txn.ticker,
            trade_date=txn.trade_date,
            quantity=sell_quantity,
            proceeds_in_base=proceeds,
            cost_in_base=cost_of_sold,
            profit_in_base=proceeds - cost_of_sold,
        )

    def _sell_quantity(self, holding: Holding, txn: Transaction) -> Optional[Decimal]:
        """Units this sell closes under the oversell policy, or None to skip it."""
        if self._oversell_policy == OversellPolicy.REJECT:
            if txn.quantity > holding.quantity:
                raise InsufficientSharesError(
                    txn.ticker,
                    requested=str(txn.quantity),
                    available=str(max(holding.quantity, ZERO)),
                )
            return txn.quantity

        if holding.quantity <= ZERO:
            return None
        if self._oversell_policy == OversellPolicy.CLAMP:
            return min(txn.quantity, holding.quantity)
        return txn.quantity

    @staticmethod
    def _summarize(closed: list[ClosedTrade]) -> RealizedGains:
        winning = sum(1 for trade in closed if trade.is_win)
        losing = len(closed) - winning
        total = winning + losing
        win_ratio = Decimal(winning) / Decimal(total) * HUNDRED if total > 0 else ZERO
        return RealizedGains(
            winning_trades=winning,
            losing_trades=losing,
            total_closed_trades=total,
            win_ratio=win_ratio,
            total_realized_in_base=sum((trade.profit_in_base for trade in closed), ZERO),
            closed_trades=tuple(closed),
        )
