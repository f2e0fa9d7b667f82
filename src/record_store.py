from decimal import Decimal
from typing import Dict, Optional

from models import DisputeState, TransactionRecord


class TransactionRecordStore:
    """
    Stores deposits and withdrawals for later dispute lookups.
    Amounts are kept as signed net effects so that dispute, resolve and
    chargeback apply the same magnitude regardless of the original type.
    """

    def __init__(self):
        self._records: Dict[int, TransactionRecord] = {}

    def put(self, transaction_id: int, client_id: int, signed_amount: Decimal) -> bool:
        """Insert a new record. First write wins; returns False for a duplicate id."""
        if transaction_id in self._records:
            return False
        self._records[transaction_id] = TransactionRecord(client_id=client_id, amount=signed_amount)
        return True

    def get(self, transaction_id: int) -> Optional[TransactionRecord]:
        """Retrieve stored record by ID."""
        return self._records.get(transaction_id)

    def get_for_client(self, transaction_id: int, client_id: int) -> Optional[TransactionRecord]:
        """Retrieve a record only if it is owned by client_id."""
        record = self._records.get(transaction_id)
        if record is None or record.client_id != client_id:
            return None
        return record

    def mark_disputed(self, transaction_id: int) -> None:
        self._records[transaction_id].dispute_state = DisputeState.DISPUTED

    def clear_disputed(self, transaction_id: int) -> None:
        self._records[transaction_id].dispute_state = DisputeState.NONE

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._records

    def __len__(self) -> int:
        return len(self._records)
