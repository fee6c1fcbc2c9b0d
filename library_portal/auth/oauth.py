from functools import wraps
from http import HTTPStatus

from flask import current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    get_jwt,
    get_jwt_identity,
    verify_jwt_in_request,
)
from flask_restx import abort

from library_portal.utils import get_storage, public_user

ADMIN_IDENTITY = "admin"
CARD_PREFIX = "card-"

# what kind of login a token was issued for
ADMIN = "admin"
CARD = "card"
USER = "user"


def issue_tokens(identity, kind):
    claims = {"kind": kind}
    return {
        "access_token": create_access_token(identity=identity, additional_claims=claims),
        "refresh_token": create_refresh_token(identity=identity, additional_claims=claims),
    }


def load_session_user(identity, kind):
    """Resolve a token identity to the account it stands for, or None if it is gone."""
    if kind == ADMIN and identity == ADMIN_IDENTITY:
        return {"id": ADMIN_IDENTITY, "email": current_app.config["ADMIN_EMAIL"], "kind": ADMIN}

    storage = get_storage()
    if kind == CARD:
        card = storage.get_library_card_application(identity.removeprefix(CARD_PREFIX))
        if card is None:
            return None
        return {
            "id": card["id"],
            "email": card["email"],
            "name": f"{card['first_name']} {card['last_name']}",
            "card_number": card["card_number"],
            "kind": CARD,
        }

    user = storage.get_user(identity)
    if user is None:
        return None
    return {**public_user(user), "kind": USER}


def is_admin(identity, claims):
    kind = claims.get("kind")
    if kind == ADMIN:
        return True
    if kind == CARD:
        return False
    return get_storage().has_role(identity, "admin")


def current_is_admin():
    return is_admin(get_jwt_identity(), get_jwt())


def admin_required(fn):
    @wraps(fn)
    def decorator(*args, **kwargs):
        verify_jwt_in_request()
        if current_is_admin():
            return fn(*args, **kwargs)
        else:
            abort(HTTPStatus.FORBIDDEN, "Admin access required")

    return decorator
