"""
import_engine.field_map - CSV column order and per-column defaults.

The bulk donation CSV is positional: the header row is skipped and each
record is read in this fixed column order.
"""

from decimal import Decimal

from db.models import PaymentMethod

COLUMNS: tuple[str, ...] = (
    "campaignId",
    "amount",
    "donorEmail",
    "donorFirstName",
    "donorLastName",
    "paymentMethod",
    "message",
)

HEADER_LINE = ",".join(COLUMNS)

# donorEmail values (case-insensitive) that mark an anonymous donation
ANONYMOUS_MARKERS = frozenset({"", "anonymous"})

ANONYMOUS_FIRST_NAME = "Anonymous"
ANONYMOUS_LAST_NAME  = "Donor"

DEFAULT_FIRST_NAME = "Unknown"
DEFAULT_LAST_NAME  = "Donor"

DEFAULT_PAYMENT_METHOD = PaymentMethod.CARD

# Largest id a BIGINT primary key can hold.
MAX_CAMPAIGN_ID = 2**63 - 1

# donations.amount is Numeric(10, 2): at most 8 integer digits and 2 places.
AMOUNT_PLACES = 2
AMOUNT_LIMIT = Decimal(10) ** 8
