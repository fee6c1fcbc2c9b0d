from flask import jsonify, make_response
from flask_restx import Namespace, Resource

from library_portal.auth.oauth import admin_required
from library_portal.borrows import BorrowStatus
from library_portal.cards.lifecycle import ApplicationStatus
from library_portal.utils import get_storage, public_user

reports_namespace = Namespace("Reports", description="Admin reports", path="/")


@reports_namespace.route("/admin/users")
class Users(Resource):
    @admin_required
    def get(self):
        storage = get_storage()
        return make_response(
            jsonify(
                students=[public_user(user) for user in storage.get_students()],
                non_students=[public_user(user) for user in storage.get_non_students()],
            )
        )


@reports_namespace.route("/admin/stats")
class Stats(Resource):
    @admin_required
    def get(self):
        storage = get_storage()
        users = storage.get_students() + storage.get_non_students()
        cards = storage.get_library_card_applications()
        borrows = storage.get_book_borrows()

        def count(records, status):
            return sum(1 for record in records if record["status"] == status)

        return make_response(
            jsonify(
                total_users=len(users),
                total_books=len(borrows),
                library_cards=len(cards),
                pending_cards=count(cards, ApplicationStatus.PENDING.value),
                approved_cards=count(cards, ApplicationStatus.APPROVED.value),
                borrowed_books=count(borrows, BorrowStatus.BORROWED.value),
                returned_books=count(borrows, BorrowStatus.RETURNED.value),
                donations=len(storage.get_donations()),
                unseen_messages=sum(
                    1 for message in storage.get_contact_messages() if not message["is_seen"]
                ),
            )
        )
