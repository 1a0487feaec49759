"""Order confirmation e-mail."""

import smtplib

from flask import current_app
from flask_mail import Message

from greenshop.extensions import mail


def send_order_confirmation(user, receipt):
    """Best-effort confirmation mail. Returns True when handed to the mail server."""
    msg = Message(
        subject=f'Your GreenShop order {receipt.order_number}',
        recipients=[user.email],
        body=(
            f'Hi {user.full_name},\n\n'
            f'Thanks for shopping sustainably! Order {receipt.order_number} is placed.\n'
            f'Total: {receipt.total}\n'
            f'Green points earned: {receipt.green_points_earned}\n'
            f'CO2 saved: {receipt.co2_saved} kg\n'
        ),
    )
    try:
        mail.send(msg)
    except (smtplib.SMTPException, OSError) as e:
        current_app.logger.warning('order %s: confirmation mail to %s failed: %s',
                                   receipt.order_number, user.email, e)
        return False
    return True
