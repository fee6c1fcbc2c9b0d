from http import HTTPStatus

from flask import jsonify, make_response, request
from flask_jwt_extended import current_user, jwt_required
from flask_restx import Namespace, Resource, fields

from library_portal.auth.oauth import CARD, USER, admin_required, current_is_admin
from library_portal.cards.lifecycle import ApplicationStatus
from library_portal.utils import get_card_applications

card_namespace = Namespace("Library Cards", description="Library card applications", path="/")

application_input = card_namespace.model(
    "LibraryCardApplicationInput",
    {
        "first_name": fields.String(required=True, description="First Name"),
        "last_name": fields.String(required=True, description="Last Name"),
        "father_name": fields.String(description="Father's Name"),
        "dob": fields.Date(description="Date of birth"),
        "class": fields.String(required=True, description="Class, e.g. Class 12"),
        "field": fields.String(description="Field of study", enum=[
            "Computer Science", "Commerce", "Humanities", "Pre-Engineering", "Pre-Medical"
        ]),
        "roll_no": fields.String(required=True, description="Roll Number"),
        "email": fields.String(required=True, description="Email"),
        "phone": fields.String(required=True, description="Phone"),
        "address_street": fields.String(required=True, description="Street"),
        "address_city": fields.String(required=True, description="City"),
        "address_state": fields.String(required=True, description="State"),
        "address_zip": fields.String(required=True, description="ZIP code"),
    },
)

status_input = card_namespace.model(
    "ApplicationStatusInput",
    {
        "status": fields.String(
            required=True,
            description="New status",
            enum=[status.value for status in ApplicationStatus],
        ),
    },
)


@card_namespace.route("/library-card-applications")
class Applications(Resource):
    @jwt_required()
    def get(self):
        lifecycle = get_card_applications()
        if current_is_admin():
            applications = lifecycle.list_applications()
        elif current_user["kind"] == CARD:
            applications = [lifecycle.get(current_user["id"])]
        else:
            applications = lifecycle.list_applications(user_id=current_user["id"])
        return make_response(jsonify(applications=applications))

    @card_namespace.expect(application_input)
    @jwt_required(optional=True)
    def post(self):
        payload = dict(request.json or {})
        # anonymous and card-holder submissions are not tied to an account
        payload["user_id"] = current_user["id"] if current_user and current_user["kind"] == USER else None
        application = get_card_applications().submit(payload)
        return make_response(jsonify(application=application), HTTPStatus.CREATED)


@card_namespace.route("/library-card-applications/<string:application_id>")
@card_namespace.doc(params={"application_id": "Application ID"})
class Application(Resource):
    @admin_required
    def delete(self, application_id):
        get_card_applications().delete(application_id)
        return make_response(jsonify(success=True))


@card_namespace.route("/library-card-applications/<string:application_id>/status")
@card_namespace.doc(params={"application_id": "Application ID"})
class ApplicationStatusResource(Resource):
    @card_namespace.expect(status_input)
    @admin_required
    def patch(self, application_id):
        data = request.json or {}
        application = get_card_applications().transition(application_id, data.get("status"))
        if application is None:
            return make_response(jsonify(error="Application not found"), HTTPStatus.NOT_FOUND)
        return make_response(jsonify(application=application))
