# -*- coding: utf-8 -*-
# ------------------------------------------------------------------------------
#
#   Copyright 2025 Valory AG
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#
# ------------------------------------------------------------------------------

"""Helper utilities."""

import math
import typing as t
from decimal import Decimal, InvalidOperation
from fractions import Fraction


HumanAmount = t.Union[Decimal, int, float, str]


def parse_amount(value: HumanAmount) -> Decimal:
    """
    Parse a human readable amount into a Decimal.

    Floats go through their shortest string representation so that `2.4`
    means exactly 2.4 and not its binary approximation.
    """
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        amount = Decimal(str(value))
    else:
        try:
            amount = Decimal(str(value).strip() or "0")
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {value!r}") from e

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def to_smallest_unit(amount: HumanAmount, decimals: int) -> int:
    """Convert a human readable amount to the smallest unit, truncating toward zero."""
    if decimals < 0:
        raise ValueError(f"Invalid decimals: {decimals}")
    exact = Fraction(parse_amount(amount)) * 10**decimals
    return math.trunc(exact)


def calc_top_up_amount(
    min_amount: HumanAmount, current_amount: int, decimals: int
) -> int:
    """
    Compute how much is missing to reach `min_amount`.

    The result is in the smallest unit and may be zero or negative, meaning
    that no top up is needed.
    """
    return to_smallest_unit(min_amount, decimals) - int(current_amount)


def format_amount(amount: t.Optional[int], decimals: int) -> str:
    """Render an amount in the smallest unit as a human readable decimal."""
    if amount is None:
        return "0"

    sign = "-" if amount < 0 else ""
    digits = str(abs(int(amount)))
    if decimals <= 0:
        return f"{sign}{digits}{'0' * -decimals}"

    digits = digits.rjust(decimals + 1, "0")
    whole, fraction = digits[:-decimals], digits[-decimals:].rstrip("0")
    if not fraction:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{fraction}"
