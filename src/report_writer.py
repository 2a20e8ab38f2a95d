import csv
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Dict, TextIO

from models import ClientAccount, ZERO

FIELDNAMES = ["client", "available", "held", "total", "locked"]
DISPLAY_PLACES = Decimal("0.0001")


def format_decimal(value: Decimal) -> str:
    """Format decimal with at most 4 decimal places; zero is always plain "0"."""
    if value == ZERO:
        return "0"
    if value.as_tuple().exponent < DISPLAY_PLACES.as_tuple().exponent:
        value = value.quantize(DISPLAY_PLACES, rounding=ROUND_HALF_EVEN)
    return f"{value:f}"


def format_account(account: ClientAccount) -> list:
    return [
        account.client_id,
        format_decimal(account.available),
        format_decimal(account.held),
        format_decimal(account.total),
        str(account.locked).lower(),
    ]


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    """Write one CSV row per client, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(FIELDNAMES)
    for client_id in sorted(accounts.keys()):
        writer.writerow(format_account(accounts[client_id]))
