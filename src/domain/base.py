"""Base class and column types for domain entities"""

from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy import BigInteger, DateTime, Integer, Numeric, String
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel

# Text column sizes
DESCRIPTION_MAX_LENGTH = 255
CLIENT_NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 320

# SQLite only auto-increments INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer(), "sqlite")

# Input scale accepted for line items
QUANTITY_DECIMAL_PLACES = 6
PRICE_DECIMAL_PLACES = 6
RATE_DECIMAL_PLACES = 4
AMOUNT_MAX_DIGITS = 18
RATE_MAX_DIGITS = 7
# qty x price x rate / 100 never needs more places than this
TOTAL_DECIMAL_PLACES = QUANTITY_DECIMAL_PLACES + PRICE_DECIMAL_PLACES + RATE_DECIMAL_PLACES + 2


class DecimalType(TypeDecorator):
    """
    Exact decimal column

    NUMERIC(precision, scale) where the database has a real decimal type.
    SQLite's NUMERIC goes through float, so there the value is kept as its
    decimal string and parsed back into a Decimal.
    """

    impl = Numeric
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(80))
        return dialect.type_descriptor(self.impl)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        if dialect.name == "sqlite":
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value) if dialect.name == "sqlite" else value


class UtcDateTime(TypeDecorator):
    """Timezone-aware timestamp stored as UTC; SQLite rows load back with tzinfo"""

    impl = DateTime
    cache_ok = True

    def __init__(self):
        super().__init__(timezone=True)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class BaseModel(SQLModel):

    """Shared base for SQLModel table entities"""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
