import csv
import logging
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Dict, Iterable, Iterator, Optional

from models import Transaction, TransactionType, ClientAccount, ProcessingResult, ProcessingStats
from ledger import AccountLedger
from record_store import TransactionRecordStore
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)

AMOUNT_PRECISION = Decimal("0.0001")
MAX_CLIENT_ID = 65535
MAX_TRANSACTION_ID = 4294967295


class PaymentsEngine:
    """
    Reads transactions from a CSV source and folds them, strictly in input
    order, over one ledger and one record store.
    """

    def __init__(self):
        self._ledger = AccountLedger()
        self._records = TransactionRecordStore()
        self._processor = TransactionProcessor(self._ledger, self._records)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        # Opening failures propagate: nothing has been processed yet.
        # Undecodable bytes become replacement characters and fail row parsing.
        with open(filepath, "r", newline="", encoding="utf-8", errors="replace") as f:
            logger.info(f"Processing transactions from {filepath}")
            reader = csv.DictReader(f, skipinitialspace=True)
            for row in self._read_rows(reader):
                transaction = None if row is None else self._parse_csv_row(row)
                if transaction is None:
                    self._stats.record(ProcessingResult.MALFORMED_INPUT)
                    continue
                self._apply(transaction)

        logger.info(self._stats.summary())
        return self._ledger.accounts()

    @staticmethod
    def _read_rows(reader: csv.DictReader) -> Iterator[Optional[Dict[Optional[str], Optional[str]]]]:
        """Yield rows from reader, or None for a line the csv module rejects."""
        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                logger.warning(f"Failed to read line {reader.line_num}: {e}")
                yield None
                continue
            yield row

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Process already parsed transactions and return final account states."""
        for transaction in transactions:
            self._apply(transaction)
        return self._ledger.accounts()

    def _apply(self, transaction: Transaction) -> ProcessingResult:
        logger.debug(f"Applying {transaction}")
        result = self._processor.process_transaction(transaction)
        self._stats.record(result)
        return result

    def _parse_csv_row(self, row: Dict[Optional[str], Optional[str]]) -> Optional[Transaction]:
        """Parse CSV row into Transaction. Returns None for malformed rows."""
        try:
            normalized = {
                k.strip().lower(): (v or "").strip()
                for k, v in row.items()
                if isinstance(k, str)
            }

            transaction_type = TransactionType(normalized["type"].lower())
            client_id = int(normalized["client"])
            transaction_id = int(normalized["tx"])

            if not 1 <= client_id <= MAX_CLIENT_ID:
                raise ValueError(f"client id {client_id} out of range")
            if not 1 <= transaction_id <= MAX_TRANSACTION_ID:
                raise ValueError(f"transaction id {transaction_id} out of range")

            amount = None
            if transaction_type.is_disputable:
                amount = self._parse_amount(normalized.get("amount", ""))

            return Transaction(
                transaction_type=transaction_type,
                client_id=client_id,
                transaction_id=transaction_id,
                amount=amount,
            )
        except (KeyError, ValueError, InvalidOperation) as e:
            logger.warning(f"Failed to parse row {row}: {e!r}")
            return None

    @staticmethod
    def _parse_amount(amount_str: str) -> Decimal:
        if not amount_str:
            raise ValueError("missing amount")
        amount = Decimal(amount_str)
        if not amount.is_finite():
            raise ValueError(f"amount {amount_str!r} is not a number")
        amount = amount.quantize(AMOUNT_PRECISION, rounding=ROUND_DOWN)
        if amount <= 0:
            raise ValueError(f"amount {amount_str!r} must be positive")
        return amount
