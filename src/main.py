import csv
import logging
import sys
from decimal import Decimal
from typing import Dict, Optional, TextIO

from pydantic import ValidationError

from config import Settings, get_settings
from models import ClientAccount
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

REPORT_HEADER = ["client", "available", "held", "total", "locked"]


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format=settings.log_format,
        stream=sys.stderr,
    )


def format_decimal(value: Decimal, places: int = 4) -> str:
    """Format decimal with a fixed number of decimal places."""
    return f"{value.quantize(Decimal(1).scaleb(-places)):f}"


def write_report(accounts: Dict[int, ClientAccount], stream: TextIO, places: int = 4) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_decimal(account.available, places),
            format_decimal(account.held, places),
            format_decimal(account.total, places),
            str(account.locked).lower(),
        ])


def main(argv: Optional[list] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e.errors()[0]['msg']}", file=sys.stderr)
        return 1
    configure_logging(settings)

    if len(argv) != 1:
        print("Usage: payments-engine <input.csv>", file=sys.stderr)
        return 1

    filepath = argv[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        return 1

    write_report(accounts, sys.stdout, settings.decimal_places)
    return 0


if __name__ == "__main__":
    sys.exit(main())
