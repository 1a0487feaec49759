"""Cart and checkout forms."""

from wtforms import DecimalField, IntegerField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional
from greenshop.forms.auth import ApiForm


class AddToCartForm(ApiForm):
    product_id = IntegerField('Product', validators=[DataRequired(message='Product is required')])
    quantity = IntegerField('Quantity', default=1, validators=[
        Optional(),
        NumberRange(min=1, message='Quantity must be at least 1')
    ])


class UpdateCartForm(ApiForm):
    item_id = IntegerField('Item', validators=[DataRequired(message='Item is required')])
    quantity = IntegerField('Quantity', validators=[
        InputRequired(message='Quantity is required'),
        NumberRange(min=1, message='Quantity must be at least 1')
    ])


class CheckoutForm(ApiForm):
    """Mock payment confirmation. Amount rules live in validate_donation()."""
    donation_amount = DecimalField('Plant a tree donation', validators=[Optional()])
