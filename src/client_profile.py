import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from currency import Currency, ZERO
from models import (
    APPLIED,
    IGNORED_INVALID,
    IGNORED_NO_DISPUTE,
    Outcome,
    RejectReason,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)


@dataclass
class ClientProfile:
    """
    One client's balances, lock flag and the deposits/withdrawals it accepted.
    Stored transactions are keyed by tx id so dispute records can find them.
    Duplicate tx ids are detected per client only; ids reused by another
    client are not seen here.
    Invariant: total == available + held after every call to process().
    """

    client_id: int
    available: Currency = ZERO
    held: Currency = ZERO
    total: Currency = ZERO
    locked: bool = False
    transactions: Dict[int, Transaction] = field(default_factory=dict)

    def process(self, transaction: Transaction) -> Outcome:
        """
        Apply one transaction for this client.

        Returns:
            APPLIED: balances and/or dispute state changed
            IGNORED_INVALID: deposit/withdrawal without a positive amount
            IGNORED_NO_DISPUTE: unknown tx, or no open dispute to settle
            Outcome.rejected(reason): well-formed but not allowed right now
        """
        match transaction.tx_type:
            case TransactionType.DEPOSIT:
                return self._deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._dispute(transaction)
            case TransactionType.RESOLVE:
                return self._resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._chargeback(transaction)

        raise ValueError(f"unknown transaction type: {transaction.tx_type!r}")

    def _check_money_movement(self, transaction: Transaction) -> Optional[Outcome]:
        name = transaction.tx_type.value.capitalize()

        if transaction.amount is None or not transaction.amount.is_positive():
            logger.warning(f"{name} tx {transaction.tx_id}: invalid amount {transaction.amount}, ignoring")
            return IGNORED_INVALID

        if self.locked:
            logger.warning(f"{name} tx {transaction.tx_id}: client {self.client_id} account is locked, rejecting")
            return Outcome.rejected(RejectReason.ACCOUNT_LOCKED)

        if transaction.tx_id in self.transactions:
            logger.warning(f"{name} tx {transaction.tx_id}: transaction id already used, rejecting")
            return Outcome.rejected(RejectReason.DUPLICATE_TRANSACTION)

        return None

    def _deposit(self, transaction: Transaction) -> Outcome:
        failure = self._check_money_movement(transaction)
        if failure is not None:
            return failure

        self.available += transaction.amount
        self.total += transaction.amount
        self.transactions[transaction.tx_id] = transaction
        return APPLIED

    def _withdrawal(self, transaction: Transaction) -> Outcome:
        failure = self._check_money_movement(transaction)
        if failure is not None:
            return failure

        if self.available < transaction.amount:
            logger.warning(
                f"Withdrawal tx {transaction.tx_id}: {transaction.amount} exceeds available funds {self.available}, rejecting"
            )
            return Outcome.rejected(RejectReason.INSUFFICIENT_FUNDS)

        self.available -= transaction.amount
        self.total -= transaction.amount
        self.transactions[transaction.tx_id] = transaction
        return APPLIED

    def _dispute(self, transaction: Transaction) -> Outcome:
        original = self.transactions.get(transaction.tx_id)

        if original is None:
            logger.info(f"Dispute for tx {transaction.tx_id}: no such transaction for client {self.client_id}")
            return IGNORED_NO_DISPUTE

        if original.under_dispute:
            logger.info(f"Dispute for tx {transaction.tx_id}: transaction already disputed")
            return IGNORED_NO_DISPUTE

        if self.available < original.amount:
            logger.warning(
                f"Dispute for tx {transaction.tx_id}: {original.amount} exceeds available funds {self.available}, rejecting"
            )
            return Outcome.rejected(RejectReason.INSUFFICIENT_FUNDS)

        self.available -= original.amount
        self.held += original.amount
        original.start_dispute()
        return APPLIED

    def _open_dispute(self, transaction: Transaction) -> Optional[Transaction]:
        original = self.transactions.get(transaction.tx_id)
        if original is None or not original.under_dispute:
            name = transaction.tx_type.value.capitalize()
            logger.info(f"{name} for tx {transaction.tx_id}: no open dispute for client {self.client_id}")
            return None
        return original

    def _resolve(self, transaction: Transaction) -> Outcome:
        original = self._open_dispute(transaction)
        if original is None:
            return IGNORED_NO_DISPUTE

        self.held -= original.amount
        self.available += original.amount
        original.stop_dispute()
        return APPLIED

    def _chargeback(self, transaction: Transaction) -> Outcome:
        original = self._open_dispute(transaction)
        if original is None:
            return IGNORED_NO_DISPUTE

        self.held -= original.amount
        self.total -= original.amount
        self.locked = True
        original.stop_dispute()
        return APPLIED

    def as_row(self) -> Tuple[int, str, str, str, str]:
        return (
            self.client_id,
            str(self.available),
            str(self.held),
            str(self.total),
            str(self.locked).lower(),
        )

    def __str__(self) -> str:
        return ",".join(str(value) for value in self.as_row())
