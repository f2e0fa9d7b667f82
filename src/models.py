from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def is_disputable(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeState(Enum):
    NONE = "none"
    DISPUTED = "disputed"


class ProcessingResult(Enum):
    SUCCESS = "success"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    RECORD_NOT_FOUND = "record_not_found"
    INVALID_STATE_TRANSITION = "invalid_state_transition"
    ACCOUNT_LOCKED = "account_locked"
    MALFORMED_INPUT = "malformed_input"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class TransactionRecord:
    """
    A stored deposit or withdrawal.
    amount is signed: positive for deposits, negative for withdrawals.
    """
    client_id: int
    amount: Decimal
    dispute_state: DisputeState = DisputeState.NONE

    @property
    def is_disputed(self) -> bool:
        return self.dispute_state == DisputeState.DISPUTED


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held


class ProcessingStats:
    """Counters for the outcome of every row seen during a run."""

    def __init__(self):
        self._counts = Counter()

    def record(self, result: ProcessingResult) -> None:
        self._counts[result] += 1

    def count(self, result: ProcessingResult) -> int:
        return self._counts[result]

    @property
    def processed(self) -> int:
        return self._counts[ProcessingResult.SUCCESS]

    @property
    def failed(self) -> int:
        return sum(self._counts.values()) - self.processed

    def summary(self) -> str:
        failures = ", ".join(
            f"{result.value}={self._counts[result]}"
            for result in ProcessingResult
            if result != ProcessingResult.SUCCESS and self._counts[result]
        )
        line = f"Processed: {self.processed}, Failed: {self.failed}"
        return f"{line} ({failures})" if failures else line
