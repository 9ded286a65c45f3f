"""
Order financial calculators.

All amounts are integer cents. Decimal is used only for the tax multiplication
so the 19% rate never goes through floating point.

Usage:
    from orders.calculators import OrderCalculator
    calculator = OrderCalculator(order.items.all(), discount_cents=order.discount_cents)
    totals = calculator.calculate_totals()
"""

from decimal import Decimal, ROUND_FLOOR
from typing import Dict, Iterable

# Colombian VAT (IVA)
TAX_RATE = Decimal("0.19")


def line_subtotal_cents(quantity: int, unit_price_cents: int) -> int:
    return int(quantity) * int(unit_price_cents)


def tax_cents(subtotal_cents: int) -> int:
    """
    Tax for a subtotal, rounded down to the cent.

    Examples:
        >>> tax_cents(3000)
        570
        >>> tax_cents(1)
        0
    """
    tax = Decimal(int(subtotal_cents)) * TAX_RATE
    return int(tax.to_integral_value(rounding=ROUND_FLOOR))


def total_cents(subtotal_cents: int, tax: int, discount_cents: int = 0) -> int:
    return int(subtotal_cents) + int(tax) - int(discount_cents)


class OrderCalculator:
    """
    Derives subtotal, tax and total for a set of order lines.

    Lines only need ``subtotal_cents`` attributes, so both saved OrderItem
    rows and unsaved priced lines work.
    """

    def __init__(self, lines: Iterable, discount_cents: int = 0):
        self.lines = list(lines)
        self.discount_cents = int(discount_cents or 0)

    def calculate_subtotal(self) -> int:
        return sum((int(line.subtotal_cents) for line in self.lines), 0)

    def calculate_tax(self, subtotal: int = None) -> int:
        if subtotal is None:
            subtotal = self.calculate_subtotal()
        return tax_cents(subtotal)

    def calculate_totals(self) -> Dict[str, int]:
        subtotal = self.calculate_subtotal()
        tax = self.calculate_tax(subtotal)
        return {
            "subtotal_cents": subtotal,
            "tax_cents": tax,
            "discount_cents": self.discount_cents,
            "total_cents": total_cents(subtotal, tax, self.discount_cents),
        }
