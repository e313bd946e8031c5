# stockroom/services/codes.py
"""
Human-readable identifiers.

Product code:  <PREFIX><NNN>
  - PREFIX: letters of the category name, first 3, upper-cased (no padding,
    so "Tv" gives "TV")
  - NNN: 1 + highest suffix among active products with the same prefix,
    zero-padded to 3 digits

Batch number:  BATCH_<productCode>_<DDMMYY>
"""

import re
from datetime import date
from typing import Iterable

from stockroom.core.errors import ConflictError, ValidationError

PRODUCT_CODE_RE = re.compile(r"^[A-Z]{1,3}\d{3}$")
MAX_SEQUENCE = 999


def category_prefix(category_name: str) -> str:
    letters = re.sub(r"[^a-zA-Z]", "", category_name)
    prefix = letters[:3].upper()
    if not prefix:
        raise ValidationError(
            "Category name must contain at least one letter to derive a product code",
            category_name=category_name,
        )
    return prefix


def next_product_code(prefix: str, existing_codes: Iterable[str]) -> str:
    """
    Codes that do not match ^<prefix>\\d{3}$ exactly are ignored, so
    "FO" never picks up "FOO001".
    """
    pattern = re.compile(rf"^{re.escape(prefix)}(\d{{3}})$")
    highest = 0
    for code in existing_codes:
        match = pattern.match(code)
        if match:
            highest = max(highest, int(match.group(1)))

    if highest >= MAX_SEQUENCE:
        raise ConflictError(
            f"Product code sequence for prefix {prefix} is exhausted",
            prefix=prefix,
        )
    return f"{prefix}{highest + 1:03d}"


def is_valid_product_code(code: str) -> bool:
    return PRODUCT_CODE_RE.match(code) is not None


def batch_number(product_code: str, created: date) -> str:
    return f"BATCH_{product_code}_{created:%d%m%y}"
