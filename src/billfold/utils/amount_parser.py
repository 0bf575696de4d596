"""Amount parsing utilities."""

import re

from billfold.domain.errors import InvalidAmountError
from billfold.domain.money import Money


def parse_amount(amount_str: str) -> Money:
    """Parse a user-entered amount in major units into Money.

    Accepts "123.45", "$123.45", "1,234.56" and "R$ 1,234.56". Amounts
    with more than two decimal places are rounded half away from zero.

    Args:
        amount_str: Amount string

    Returns:
        Money amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"R\$|[$€£¥]", "", amount_str.strip())
    cleaned = cleaned.replace(",", "").strip()

    try:
        return Money.from_major(cleaned)
    except InvalidAmountError as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
