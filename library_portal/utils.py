from datetime import datetime, timedelta

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password):
    return generate_password_hash(password)


def check_password(password, password_hash):
    return check_password_hash(password_hash, password)


def calculate_due_date(**kwargs):
    return kwargs.get("date", datetime.now()) + timedelta(
        days=kwargs.get("days", current_app.config["BORROW_PERIOD_DAYS"])
    )


def get_storage():
    return current_app.extensions["storage"]


def get_card_applications():
    return current_app.extensions["card_applications"]


def public_user(user):
    """A stored user without the password hash."""
    return {k: v for k, v in user.items() if k != "password"}
