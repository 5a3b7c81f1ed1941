"""
Typed views of raw attribute text.

A product attribute always keeps the text it was given. Alongside it the
catalog stores one typed projection chosen by the attribute type's data kind:
numeric text becomes a Decimal, date text a ``datetime.date``, and boolean
text a tri-state flag. Text that does not parse yields an empty projection
rather than an error.
"""
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

BOOLEAN_TOKENS = {
    "true": True,
    "yes": True,
    "1": True,
    "false": False,
    "no": False,
    "0": False,
}

_DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
# Extended calendar form only; no basic (20240301) or week (2024-W10-5) dates
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# Numeric(15, 6) leaves nine integer digits
_NUMERIC_QUANTUM = Decimal("0.000001")
_NUMERIC_LIMIT = Decimal(10) ** 9


def parse_decimal(raw: str) -> Optional[Decimal]:
    text = raw.strip()
    if not _DECIMAL_PATTERN.match(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def parse_date(raw: str) -> Optional[date]:
    text = raw.strip()
    if not _DATE_PATTERN.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_boolean(raw: str) -> Optional[bool]:
    return BOOLEAN_TOKENS.get(raw.lower())


def _numeric_projection(raw: str) -> Optional[Decimal]:
    value = parse_decimal(raw)
    if value is None:
        return None
    try:
        value = value.quantize(_NUMERIC_QUANTUM)
    except InvalidOperation:
        return None
    if abs(value) >= _NUMERIC_LIMIT:
        return None
    return value


@dataclass(frozen=True)
class AttributeValue:
    kind: str
    raw: str
    numeric: Optional[Decimal] = None
    calendar_date: Optional[date] = None
    boolean: Optional[bool] = None

    @property
    def typed(self) -> Union[Decimal, date, bool, str, None]:
        if self.kind == "numeric":
            return self.numeric
        if self.kind == "date":
            return self.calendar_date
        if self.kind == "boolean":
            return self.boolean
        return self.raw

    @property
    def cast_failed(self) -> bool:
        return self.kind in ("numeric", "date", "boolean") and self.typed is None

    def as_columns(self) -> dict:
        """Projection columns of a ProductAttribute row; other kinds leave all three empty."""
        return {
            "value_numeric": self.numeric,
            "value_date": self.calendar_date,
            "value_boolean": self.boolean,
        }


def cast_attribute_value(kind: str, raw: str) -> AttributeValue:
    if kind == "numeric":
        return AttributeValue(kind, raw, numeric=_numeric_projection(raw))
    if kind == "date":
        return AttributeValue(kind, raw, calendar_date=parse_date(raw))
    if kind == "boolean":
        return AttributeValue(kind, raw, boolean=parse_boolean(raw))
    return AttributeValue(kind, raw)
