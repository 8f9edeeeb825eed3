import csv
import logging
import sys
from decimal import Decimal
from typing import Dict, TextIO

from models import EXACT_CONTEXT, ClientAccount
from payments_engine import PaymentsEngine

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    stream=sys.stderr,
)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal) -> str:
    """Format decimal in plain notation, removing trailing zeros."""
    normalized = value.normalize(EXACT_CONTEXT)
    if normalized.is_zero():
        return "0"
    return f"{normalized:f}"


def write_accounts(accounts: Dict[int, ClientAccount], out: TextIO) -> None:
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])


def main():
    if len(sys.argv) != 2:
        print("Usage: payments-ledger <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        print(f"Application error: {e}", file=sys.stderr)
        sys.exit(1)

    write_accounts(accounts, sys.stdout)


if __name__ == "__main__":
    main()
