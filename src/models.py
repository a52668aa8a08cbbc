from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from currency import Currency


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class OutcomeKind(Enum):
    APPLIED = "applied"
    IGNORED_INVALID = "ignored_invalid"
    IGNORED_NO_DISPUTE = "ignored_no_dispute"
    REJECTED = "rejected"


class RejectReason(Enum):
    INSUFFICIENT_FUNDS = "insufficient funds"
    ACCOUNT_LOCKED = "account locked"
    DUPLICATE_TRANSACTION = "duplicate transaction"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    reason: Optional[RejectReason] = None

    @classmethod
    def rejected(cls, reason: RejectReason) -> "Outcome":
        return cls(OutcomeKind.REJECTED, reason)

    def __str__(self) -> str:
        if self.reason is None:
            return self.kind.value
        return f"{self.kind.value} ({self.reason.value})"


APPLIED = Outcome(OutcomeKind.APPLIED)
IGNORED_INVALID = Outcome(OutcomeKind.IGNORED_INVALID)
IGNORED_NO_DISPUTE = Outcome(OutcomeKind.IGNORED_NO_DISPUTE)


@dataclass
class Transaction:
    tx_type: TransactionType
    client_id: int
    tx_id: int
    amount: Optional[Currency] = None
    # only meaningful on stored deposits/withdrawals
    under_dispute: bool = False

    def start_dispute(self) -> None:
        self.under_dispute = True

    def stop_dispute(self) -> None:
        self.under_dispute = False

    def __repr__(self) -> str:
        return f"Transaction({self.tx_type.value}, client={self.client_id}, tx={self.tx_id}, amount={self.amount})"


class ProcessingStats:
    """Counters for outcomes seen during a run, plus rows the reader skipped."""

    def __init__(self):
        self.counts: Dict[OutcomeKind, int] = {kind: 0 for kind in OutcomeKind}
        self.skipped_rows = 0

    def record(self, outcome: Outcome) -> None:
        self.counts[outcome.kind] += 1

    def record_skipped_row(self) -> None:
        self.skipped_rows += 1

    @property
    def processed(self) -> int:
        return sum(self.counts.values())

    def summary(self) -> str:
        return (
            f"Processed: {self.processed}, "
            f"Applied: {self.counts[OutcomeKind.APPLIED]}, "
            f"Ignored invalid: {self.counts[OutcomeKind.IGNORED_INVALID]}, "
            f"Ignored no dispute: {self.counts[OutcomeKind.IGNORED_NO_DISPUTE]}, "
            f"Rejected: {self.counts[OutcomeKind.REJECTED]}, "
            f"Skipped rows: {self.skipped_rows}"
        )
