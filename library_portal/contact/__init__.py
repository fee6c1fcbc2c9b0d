from http import HTTPStatus

from flask import jsonify, make_response, request
from flask_restx import Namespace, Resource, fields

from library_portal.auth.oauth import admin_required
from library_portal.utils import get_storage

contact_namespace = Namespace("Contact", description="Contact messages", path="/")

contact_message_input = contact_namespace.model(
    "ContactMessageInput",
    {
        "name": fields.String(required=True, description="Name"),
        "email": fields.String(required=True, description="Email"),
        "subject": fields.String(required=True, description="Subject"),
        "message": fields.String(required=True, description="Message"),
    },
)

seen_input = contact_namespace.model(
    "SeenInput",
    {
        "is_seen": fields.Boolean(required=True, description="Seen flag"),
    },
)


@contact_namespace.route("/contact-messages")
class ContactMessages(Resource):
    @admin_required
    def get(self):
        return make_response(jsonify(messages=get_storage().get_contact_messages()))

    @contact_namespace.expect(contact_message_input)
    def post(self):
        data = request.json or {}
        message = {name: data.get(name, None) for name in ("name", "email", "subject", "message")}
        if not all(message.values()):
            return make_response(jsonify(error="Missing required fields"), HTTPStatus.BAD_REQUEST)
        message = get_storage().create_contact_message(message)
        return make_response(jsonify(message=message), HTTPStatus.CREATED)


@contact_namespace.route("/contact-messages/<string:message_id>")
@contact_namespace.doc(params={"message_id": "Message ID"})
class ContactMessage(Resource):
    @admin_required
    def delete(self, message_id):
        get_storage().delete_contact_message(message_id)
        return make_response(jsonify(success=True))


@contact_namespace.route("/contact-messages/<string:message_id>/seen")
@contact_namespace.doc(params={"message_id": "Message ID"})
class ContactMessageSeen(Resource):
    @contact_namespace.expect(seen_input)
    @admin_required
    def patch(self, message_id):
        is_seen = bool((request.json or {}).get("is_seen", True))
        message = get_storage().set_contact_message_seen(message_id, is_seen)
        if message is None:
            return make_response(jsonify(error="Message not found"), HTTPStatus.NOT_FOUND)
        return make_response(jsonify(message=message))
