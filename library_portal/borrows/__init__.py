from datetime import datetime
from enum import Enum
from http import HTTPStatus

from flask import jsonify, make_response, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from flask_restx import Namespace, Resource, fields

from library_portal.auth.oauth import admin_required, current_is_admin
from library_portal.exceptions import ValidationError
from library_portal.utils import calculate_due_date, get_storage

borrow_namespace = Namespace("Borrows", description="Borrow / Return operations", path="/")


class BorrowStatus(str, Enum):
    BORROWED = "borrowed"
    RETURNED = "returned"


borrow_book_input = borrow_namespace.model(
    "BorrowBookInput",
    {
        "book_title": fields.String(required=True, description="Book Title"),
        "isbn": fields.String(description="ISBN"),
        "book_id": fields.String(description="Book ID"),
        "borrow_date": fields.DateTime(description="Borrow date, defaults to now"),
    },
)

borrow_status_input = borrow_namespace.model(
    "BorrowStatusInput",
    {
        "status": fields.String(
            required=True, description="New status", enum=[s.value for s in BorrowStatus]
        ),
        "return_date": fields.DateTime(description="Return date, defaults to now"),
    },
)


def parse_datetime(value, name):
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an ISO-8601 date-time", [name]) from None
    # stored timestamps are naive local time
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def change_borrow_status(storage, borrow_id, status, return_date=None):
    """
    Move a borrow between "borrowed" and "returned". A returned book never
    goes back to borrowed. Returns None when the borrow does not exist.
    """
    try:
        status = BorrowStatus(status)
    except ValueError:
        raise ValidationError(f"Invalid status {status!r}", ["status"]) from None

    borrow = storage.get_book_borrow(borrow_id)
    if borrow is None:
        return None
    if borrow["status"] == BorrowStatus.RETURNED.value and status is BorrowStatus.BORROWED:
        raise ValidationError("A returned book cannot be marked as borrowed again", ["status"])
    if status is BorrowStatus.RETURNED and return_date is None:
        return_date = datetime.now()
    return storage.update_book_borrow_status(borrow_id, status.value, return_date)


@borrow_namespace.route("/book-borrows")
class Borrows(Resource):
    @jwt_required()
    def get(self):
        storage = get_storage()
        if current_is_admin():
            borrows = storage.get_book_borrows()
        else:
            borrows = storage.get_book_borrows_by_user(get_jwt_identity())
        return make_response(jsonify(borrows=borrows))

    @borrow_namespace.expect(borrow_book_input)
    @jwt_required()
    def post(self):
        data = request.json or {}
        book_title = data.get("book_title", None)
        isbn = data.get("isbn", None)
        book_id = data.get("book_id", None)
        if not book_title or not (isbn or book_id):
            return make_response(jsonify(error="Missing required fields"), HTTPStatus.BAD_REQUEST)

        borrow_date = data.get("borrow_date", None)
        borrow_date = parse_datetime(borrow_date, "borrow_date") if borrow_date else datetime.now()
        borrow = get_storage().create_book_borrow(
            {
                "user_id": get_jwt_identity(),
                "book_title": book_title,
                "isbn": isbn,
                "book_id": book_id,
                "borrow_date": borrow_date,
                "due_date": calculate_due_date(date=borrow_date),
                "status": BorrowStatus.BORROWED.value,
            }
        )
        return make_response(jsonify(borrow=borrow), HTTPStatus.CREATED)


@borrow_namespace.route("/book-borrows/<string:borrow_id>/status")
@borrow_namespace.doc(params={"borrow_id": "Borrow ID"})
class BorrowStatusResource(Resource):
    @borrow_namespace.expect(borrow_status_input)
    @admin_required
    def patch(self, borrow_id):
        data = request.json or {}
        return_date = data.get("return_date", None)
        if return_date:
            return_date = parse_datetime(return_date, "return_date")
        borrow = change_borrow_status(get_storage(), borrow_id, data.get("status"), return_date)
        if borrow is None:
            return make_response(jsonify(error="Borrow record not found"), HTTPStatus.NOT_FOUND)
        return make_response(jsonify(borrow=borrow))
