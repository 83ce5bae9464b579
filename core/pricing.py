"""
Service item and order total calculation.

The order total is computed in a fixed sequence that existing records
depend on:

    1. services_sum   = sum of item totals (q * v - d + a)
    2. total_discount = sum of item discounts
       total_addition = sum of item additions
    3. discount_from_percentage = services_sum * discount_percentage / 100
    4. addition_from_percentage = services_sum * addition_percentage / 100
    5. final_total = services_sum - total_discount - discount_from_percentage
                     + total_addition + addition_from_percentage

Per-item discounts and additions are therefore applied twice: once inside
each item total and again in step 5. Stored orders were priced this way, so
the formula is kept as is. See DESIGN.md, "Double-counted item adjustments".

Items may be ServiceItem models or raw mappings straight from the API;
every value goes through to_number().
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from core.numbers import to_number

_UNIT_VALUE_KEYS = ("unit_value", "unitValue", "value")


class OrderTotals(BaseModel):
    """Financial breakdown of an order, recomputed on every read."""

    services_sum: float
    total_discount: float
    total_addition: float
    discount_from_percentage: float
    addition_from_percentage: float
    final_total: float

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


def _read(item: Any, *names: str) -> Any:
    if isinstance(item, Mapping):
        for name in names:
            if name in item:
                return item[name]
        return None
    for name in names:
        if hasattr(item, name):
            return getattr(item, name)
    return None


def item_total(item: Any) -> float:
    """
    Total of one service item: quantity * unit value - discount + addition.

    No clamping: a discount larger than the line value yields a negative
    total, and quantity <= 0 is computed rather than rejected.
    """
    quantity = to_number(_read(item, "quantity"))
    unit_value = to_number(_read(item, *_UNIT_VALUE_KEYS))
    discount = to_number(_read(item, "discount"))
    addition = to_number(_read(item, "addition"))
    return quantity * unit_value - discount + addition


def calculate_totals(
    services: Iterable[Any] | None,
    discount_percentage: Any = 0,
    addition_percentage: Any = 0,
) -> OrderTotals:
    """
    Compute the financial breakdown of an order.

    Args:
        services: Service items (models or raw mappings), in display order
        discount_percentage: Order-level discount, percent of services_sum
        addition_percentage: Order-level addition, percent of services_sum

    Returns:
        OrderTotals with every intermediate line
    """
    services_sum = 0.0
    total_discount = 0.0
    total_addition = 0.0

    for item in services or ():
        services_sum += item_total(item)
        total_discount += to_number(_read(item, "discount"))
        total_addition += to_number(_read(item, "addition"))

    discount_from_percentage = services_sum * to_number(discount_percentage) / 100
    addition_from_percentage = services_sum * to_number(addition_percentage) / 100

    final_total = (
        services_sum
        - total_discount
        - discount_from_percentage
        + total_addition
        + addition_from_percentage
    )

    return OrderTotals(
        services_sum=services_sum,
        total_discount=total_discount,
        total_addition=total_addition,
        discount_from_percentage=discount_from_percentage,
        addition_from_percentage=addition_from_percentage,
        final_total=final_total,
    )


def calculate_order_totals(order: Any) -> OrderTotals:
    """Totals for a ServiceOrder or a raw order mapping."""
    return calculate_totals(
        _read(order, "services"),
        _read(order, "discount_percentage", "discountPercentage"),
        _read(order, "addition_percentage", "additionPercentage"),
    )
