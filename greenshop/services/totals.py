"""Cart line snapshots and the totals a checkout derives from them."""

from dataclasses import dataclass, asdict
from decimal import Decimal, InvalidOperation

from greenshop.services.errors import InvalidCartError, InvalidDonationError
from greenshop.utils.money import D, Money, to_string_money

# Orders store money as Numeric(12, 2).
MAX_DONATION = Decimal('1000000')


@dataclass(frozen=True)
class CartLine:
    """One cart line priced at the moment it was read."""
    user_id: int
    product_id: int
    quantity: int
    unit_price: Money
    green_points_per_unit: int = 0
    co2_saved_per_unit: Decimal = Decimal('0')
    plastic_saved_per_unit: Decimal = Decimal('0')
    water_saved_per_unit: Decimal = Decimal('0')

    @classmethod
    def from_item(cls, item):
        """Build a line from a CartItem, reading price and impact from its product."""
        product = item.product
        return cls(
            user_id=item.user_id,
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=D(product.price),
            green_points_per_unit=product.green_points or 0,
            co2_saved_per_unit=D(product.co2_saved),
            plastic_saved_per_unit=D(product.plastic_saved),
            water_saved_per_unit=D(product.water_saved),
        )

    @classmethod
    def from_snapshot(cls, data):
        return cls(
            user_id=data['user_id'],
            product_id=data['product_id'],
            quantity=data['quantity'],
            unit_price=D(data['unit_price']),
            green_points_per_unit=data['green_points_per_unit'],
            co2_saved_per_unit=D(data['co2_saved_per_unit']),
            plastic_saved_per_unit=D(data['plastic_saved_per_unit']),
            water_saved_per_unit=D(data['water_saved_per_unit']),
        )

    def snapshot(self):
        """JSON-safe form; decimals kept as strings."""
        data = asdict(self)
        for key in ('unit_price', 'co2_saved_per_unit', 'plastic_saved_per_unit', 'water_saved_per_unit'):
            data[key] = str(data[key])
        return data


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: Money
    donation_amount: Money
    total: Money
    green_points: int
    co2_saved: Decimal
    plastic_saved: Decimal
    water_saved: Decimal
    trees_funded: int

    def to_dict(self):
        return {
            'subtotal': to_string_money(self.subtotal),
            'donation_amount': to_string_money(self.donation_amount),
            'total': to_string_money(self.total),
            'green_points': self.green_points,
            'co2_saved': str(self.co2_saved),
            'plastic_saved': str(self.plastic_saved),
            'water_saved': str(self.water_saved),
            'trees_funded': self.trees_funded,
        }


def validate_lines(lines):
    """Reject lines that cannot become one order line each.

    Every line needs a quantity of at least 1 and its own product.
    """
    seen = set()
    for line in lines:
        if int(line.quantity) < 1:
            raise InvalidCartError(f'Quantity for product {line.product_id} must be at least 1.')
        if line.product_id in seen:
            raise InvalidCartError(f'Product {line.product_id} appears more than once.')
        seen.add(line.product_id)
    return lines


def validate_donation(amount, increment=10, maximum=MAX_DONATION) -> Money:
    """Return the donation as a Decimal or raise InvalidDonationError.

    A donation must be zero or a positive multiple of ``increment``, no
    larger than ``maximum``.
    """
    try:
        donation = D(amount if amount is not None else 0)
    except ValueError:
        raise InvalidDonationError('Donation must be a number.')
    if not donation.is_finite() or donation < 0:
        raise InvalidDonationError('Donation cannot be negative.')
    if maximum is not None and donation > maximum:
        raise InvalidDonationError(f'Donation cannot exceed {maximum}.')
    try:
        remainder = donation % D(increment) if increment else 0
    except InvalidOperation:
        raise InvalidDonationError('Invalid donation amount.')
    if remainder != 0:
        raise InvalidDonationError(f'Donation must be a multiple of {increment}.')
    return donation


def compute_totals(lines, donation_amount=Decimal('0'), tree_cost=10) -> CheckoutTotals:
    """Sum price and impact over ``lines``. Nothing is rounded here."""
    subtotal = Decimal('0')
    points = 0
    co2 = Decimal('0')
    plastic = Decimal('0')
    water = Decimal('0')

    for line in lines:
        qty = int(line.quantity)
        subtotal += D(line.unit_price) * qty
        points += int(line.green_points_per_unit) * qty
        co2 += D(line.co2_saved_per_unit) * qty
        plastic += D(line.plastic_saved_per_unit) * qty
        water += D(line.water_saved_per_unit) * qty

    donation = D(donation_amount)
    trees = int(donation // D(tree_cost)) if tree_cost else 0

    return CheckoutTotals(
        subtotal=subtotal,
        donation_amount=donation,
        total=subtotal + donation,
        green_points=points,
        co2_saved=co2,
        plastic_saved=plastic,
        water_saved=water,
        trees_funded=trees,
    )
