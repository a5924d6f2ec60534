"""
Field Validators

This module provides the parse functions behind every prompt in PoiseDMS.
Each parser takes the raw text typed by the user and either returns the typed
value or raises ValueError with a message that can be shown to the user as is.
The interactive retry loop lives in Services.terminal; the pydantic schemas
reuse the same parsers so both paths apply identical rules.

Rules:
- Project number: one or more digits, at most 20 characters
- Dates: ISO format YYYY-MM-DD, deadlines strictly after today
- Amounts: decimal, not negative
- ERF number: starts with "ERF" (case-sensitive)
- Telephone: 10 to 15 digits, nothing else
- Email: local@domain.tld
- Physical address: longer than 5 characters and contains a comma
- Entity ID: bare digits, or the role prefix followed by 3 digits (ARC101)
- Free text (names, building type): trimmed, no longer than its column

Usage:
    from poisedms.utils.field_validators import parse_amount

    try:
        fee = parse_amount("150000.50")
    except ValueError as e:
        print(e)
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

DATE_FORMAT = "%Y-%m-%d"
DATE_PATTERN = re.compile(r'[0-9]{4}-[0-9]{2}-[0-9]{2}')
PROJECT_NUMBER_PATTERN = re.compile(r'[0-9]+')
EMAIL_PATTERN = re.compile(r'[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}')
PHONE_PATTERN = re.compile(r'[0-9]{10,15}')
ERF_PREFIX = "ERF"

# Column widths in Models
PROJECT_NUMBER_MAX_LENGTH = 20
ENTITY_ID_MAX_LENGTH = 20
PROJECT_NAME_MAX_LENGTH = 200
NAME_MAX_LENGTH = 100
BUILDING_TYPE_MAX_LENGTH = 100
ERF_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 255
ADDRESS_MAX_LENGTH = 255


def check_length(value: str, max_length: int, label: str) -> str:
    if len(value) > max_length:
        raise ValueError(f"{label} is too long! Please use at most {max_length} characters.")
    return value


def parse_text(raw: str, label: str, max_length: int) -> str:
    """Trimmed free text; blank is allowed, anything longer than the column is not."""
    return check_length(raw.strip(), max_length, label)


def parse_project_number(raw: str, max_length: int = PROJECT_NUMBER_MAX_LENGTH) -> str:
    """
    Validate a project number.

    Example:
        >>> parse_project_number(" 1234 ")
        '1234'
        >>> parse_project_number("12a4")
        Traceback (most recent call last):
        ...
        ValueError: Invalid project number! It must contain digits only (e.g., 1234).
    """
    value = raw.strip()
    if not PROJECT_NUMBER_PATTERN.fullmatch(value):
        raise ValueError("Invalid project number! It must contain digits only (e.g., 1234).")
    return check_length(value, max_length, "Project number")


def parse_iso_date(raw: str) -> date:
    """Parse a YYYY-MM-DD date."""
    value = raw.strip()
    try:
        if not DATE_PATTERN.fullmatch(value):
            raise ValueError(value)
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValueError("Invalid date format! Please enter the date in YYYY-MM-DD format.") from None


def parse_future_date(raw: str, today: Optional[date] = None) -> date:
    """
    Parse a YYYY-MM-DD date that must be strictly after today.

    Args:
        raw (str): Text typed by the user
        today (date): Reference date, defaults to date.today()

    Returns:
        date: The parsed date

    Raises:
        ValueError: Unparseable text, or a date on or before today
    """
    parsed = parse_iso_date(raw)
    if parsed <= (today or date.today()):
        raise ValueError("Error: The date must be in the future. Please enter a date after today.")
    return parsed


def parse_amount(raw: str) -> Decimal:
    """Parse a non-negative decimal amount (rand)."""
    value = raw.strip()
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise ValueError("Invalid amount! Please enter a valid numeric value.") from None

    # Decimal accepts "NaN" and "Infinity"
    if not amount.is_finite():
        raise ValueError("Invalid amount! Please enter a valid numeric value.")
    if amount < 0:
        raise ValueError("Error: Amount cannot be negative. Please enter a valid amount.")
    return amount


def parse_erf_number(raw: str) -> str:
    value = raw.strip()
    if not value.startswith(ERF_PREFIX):
        raise ValueError("Invalid ERF number. It must start with 'ERF'.")
    return check_length(value, ERF_MAX_LENGTH, "ERF number")


def parse_telephone(raw: str) -> str:
    value = raw.strip()
    if not PHONE_PATTERN.fullmatch(value):
        raise ValueError("Invalid telephone number! Please enter 10-15 digits, numbers only.")
    return value


def parse_email(raw: str) -> str:
    value = raw.strip()
    if not EMAIL_PATTERN.fullmatch(value):
        raise ValueError("Invalid email format! Please enter a valid email (e.g., user@example.com).")
    return check_length(value, EMAIL_MAX_LENGTH, "Email")


def parse_physical_address(raw: str) -> str:
    value = raw.strip()
    if len(value) <= 5 or "," not in value:
        raise ValueError("Invalid address format! Ensure it includes street, city, and country.")
    return check_length(value, ADDRESS_MAX_LENGTH, "Address")


def parse_entity_id(raw: str, role: str, prefix: str, max_length: int = ENTITY_ID_MAX_LENGTH) -> str:
    """
    Validate an entity ID for the given role.

    Accepts a bare number ("101") or the role prefix followed by exactly three
    digits ("ARC101").

    Example:
        >>> parse_entity_id("ARC101", "Architect", "ARC")
        'ARC101'
        >>> parse_entity_id("ARC1", "Architect", "ARC")
        Traceback (most recent call last):
        ...
        ValueError: Invalid Architect ID. It must start with 'ARC' followed by a 3-digit number, or be numeric.
    """
    value = raw.strip()
    if PROJECT_NUMBER_PATTERN.fullmatch(value):
        return check_length(value, max_length, f"{role} ID")
    if re.fullmatch(re.escape(prefix) + r'[0-9]{3}', value):
        return value
    raise ValueError(
        f"Invalid {role} ID. It must start with '{prefix}' followed by a 3-digit number, or be numeric."
    )
