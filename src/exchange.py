import logging
from typing import Callable, Dict, Iterable, Iterator

from client_profile import ClientProfile
from models import Outcome, OutcomeKind, ProcessingStats, Transaction

logger = logging.getLogger(__name__)


class Exchange:
    """
    Routes transactions to per-client profiles, creating a profile on first sight of a client.
    Transactions must be ingested one at a time, in stream order.
    """

    def __init__(self, profile_factory: Callable[[int], ClientProfile] = ClientProfile):
        self._profile_factory = profile_factory
        self._clients: Dict[int, ClientProfile] = {}
        self.stats = ProcessingStats()

    def ingest(self, transaction: Transaction) -> Outcome:
        """Apply a single transaction to its client's profile and return the outcome."""
        profile = self._get_or_create_profile(transaction.client_id)
        outcome = profile.process(transaction)
        self.stats.record(outcome)

        logger.debug(f"{transaction!r}: {outcome}")
        if outcome.kind is OutcomeKind.REJECTED:
            logger.info(f"Client {transaction.client_id} tx {transaction.tx_id} rejected: {outcome.reason.value}")
        return outcome

    def process(self, transactions: Iterable[Transaction]) -> ProcessingStats:
        """Ingest every transaction of a finite stream, in order."""
        logger.info("Starting transaction stream")
        for transaction in transactions:
            self.ingest(transaction)
        logger.info(f"Transaction stream complete: {self.stats.summary()}")
        return self.stats

    def _get_or_create_profile(self, client_id: int) -> ClientProfile:
        if client_id not in self._clients:
            self._clients[client_id] = self._profile_factory(client_id)
        return self._clients[client_id]

    def get_profile(self, client_id: int) -> ClientProfile:
        return self._clients[client_id]

    def profiles(self) -> Iterator[ClientProfile]:
        """Iterate profiles in client insertion order (for the final report)."""
        return iter(self._clients.values())

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._clients
