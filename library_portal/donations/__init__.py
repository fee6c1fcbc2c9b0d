from http import HTTPStatus

from flask import jsonify, make_response, request
from flask_restx import Namespace, Resource, fields

from library_portal.auth.oauth import admin_required
from library_portal.utils import get_storage

donation_namespace = Namespace("Donations", description="Book donations", path="/")

DONATION_FIELDS = ("donor_name", "email", "book_title", "author", "quantity", "message")

donation_input = donation_namespace.model(
    "DonationInput",
    {
        "donor_name": fields.String(description="Donor Name"),
        "email": fields.String(description="Email"),
        "book_title": fields.String(description="Book Title"),
        "author": fields.String(description="Author"),
        "quantity": fields.Integer(description="Quantity"),
        "message": fields.String(description="Message"),
    },
)


@donation_namespace.route("/donations")
class Donations(Resource):
    @admin_required
    def get(self):
        return make_response(jsonify(donations=get_storage().get_donations()))

    @donation_namespace.expect(donation_input)
    def post(self):
        data = request.json or {}
        donation = get_storage().create_donation(
            {**{name: data.get(name, None) for name in DONATION_FIELDS}, "status": "received"}
        )
        return make_response(jsonify(donation=donation), HTTPStatus.CREATED)


@donation_namespace.route("/donations/<string:donation_id>")
@donation_namespace.doc(params={"donation_id": "Donation ID"})
class Donation(Resource):
    @admin_required
    def delete(self, donation_id):
        get_storage().delete_donation(donation_id)
        return make_response(jsonify(success=True))
