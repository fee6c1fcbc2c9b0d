import logging
from http import HTTPStatus

from flask import current_app, jsonify, make_response, request
from flask_jwt_extended import current_user, get_current_user, get_jwt, get_jwt_identity, jwt_required
from flask_restx import Namespace, Resource, fields

from library_portal.auth.oauth import (
    ADMIN,
    ADMIN_IDENTITY,
    CARD,
    CARD_PREFIX,
    USER,
    admin_required,
    issue_tokens,
)
from library_portal.cards.lifecycle import ApplicationStatus
from library_portal.utils import (
    check_password,
    get_card_applications,
    get_storage,
    hash_password,
    public_user,
)

logger = logging.getLogger(__name__)

auth_namespace = Namespace("Auth", description="Authentication operations", path="/")

PROFILE_FIELDS = ("full_name", "phone", "roll_number", "department", "student_class")

register_input = auth_namespace.model(
    "RegisterInput",
    {
        "email": fields.String(required=True, description="Email"),
        "password": fields.String(required=True, description="Password"),
        "full_name": fields.String(required=True, description="Full Name"),
        "phone": fields.String(description="Phone"),
        "roll_number": fields.String(description="Roll Number"),
        "department": fields.String(description="Department"),
        "student_class": fields.String(description="Class; marks the user as a student"),
    },
)

login_input = auth_namespace.model(
    "LoginInput",
    {
        "email": fields.String(description="Email"),
        "password": fields.String(description="Password"),
        "secret_key": fields.String(description="Admin secret key"),
        "library_card_id": fields.String(description="Card number of an approved library card"),
    },
)

make_admin_input = auth_namespace.model(
    "MakeAdminInput",
    {
        "email": fields.String(required=True, description="Email"),
    },
)

profile_input = auth_namespace.model(
    "ProfileInput",
    {name: fields.String(description=name.replace("_", " ").title()) for name in PROFILE_FIELDS},
)


@auth_namespace.route("/auth/register", methods=["POST"])
@auth_namespace.expect(register_input)
class Register(Resource):
    def post(self):
        data = request.json or {}
        email = data.get("email", None)
        password = data.get("password", None)
        full_name = data.get("full_name", None)

        if not all([email, password, full_name]):
            return make_response(jsonify(error="Missing required fields"), HTTPStatus.BAD_REQUEST)

        storage = get_storage()
        if storage.get_user_by_email(email):
            return make_response(jsonify(error="Email already registered"), HTTPStatus.BAD_REQUEST)

        user = storage.create_user(
            {
                **{name: data.get(name) for name in PROFILE_FIELDS},
                "email": email,
                "password": hash_password(password),
                "type": "student" if data.get("student_class") else "user",
            }
        )
        storage.create_user_role(user["id"], "user")
        logger.info("Registered user %s", user["id"])
        return make_response(
            jsonify(user=public_user(user), **issue_tokens(user["id"], USER)), HTTPStatus.CREATED
        )


@auth_namespace.route("/auth/login", methods=["POST"])
@auth_namespace.expect(login_input)
class Login(Resource):
    def post(self):
        data = request.json or {}
        email = data.get("email", None)
        password = data.get("password", None)
        secret_key = data.get("secret_key", None)
        library_card_id = data.get("library_card_id", None)
        config = current_app.config

        # a wrong secret key falls through to the normal login
        if (
            secret_key
            and secret_key == config["ADMIN_SECRET_KEY"]
            and email == config["ADMIN_EMAIL"]
            and password == config["ADMIN_PASSWORD"]
        ):
            return make_response(
                jsonify(
                    user={"id": ADMIN_IDENTITY, "email": email},
                    is_admin=True,
                    **issue_tokens(ADMIN_IDENTITY, ADMIN),
                )
            )

        if library_card_id:
            card = get_card_applications().lookup_by_card_number(library_card_id)
            if not card:
                return make_response(
                    jsonify(error="Invalid library card ID"), HTTPStatus.UNAUTHORIZED
                )
            if card["status"] != ApplicationStatus.APPROVED.value:
                return make_response(
                    jsonify(error="Library card is not approved yet"), HTTPStatus.UNAUTHORIZED
                )
            return make_response(
                jsonify(
                    user={
                        "id": card["id"],
                        "email": card["email"],
                        "name": f"{card['first_name']} {card['last_name']}",
                        "card_number": card["card_number"],
                    },
                    is_library_card=True,
                    **issue_tokens(f"{CARD_PREFIX}{card['id']}", CARD),
                )
            )

        user = get_storage().get_user_by_email(email) if email else None
        if not user or not password or not check_password(password, user["password"]):
            return make_response(jsonify(error="Invalid credentials"), HTTPStatus.UNAUTHORIZED)

        return make_response(jsonify(user=public_user(user), **issue_tokens(user["id"], USER)))


@auth_namespace.route("/auth/refresh", methods=["POST"])
class Refresh(Resource):
    @jwt_required(refresh=True)
    def post(self):
        """Create a new access token from a refresh token"""
        tokens = issue_tokens(get_jwt_identity(), get_jwt().get("kind"))
        return make_response(jsonify(access_token=tokens["access_token"]))


@auth_namespace.route("/auth/me")
class Me(Resource):
    @jwt_required()
    def get(self):
        user = get_current_user()
        kind = user["kind"]
        if kind == ADMIN:
            return make_response(jsonify(user=user, roles=["admin"], is_admin=True))
        if kind == CARD:
            return make_response(jsonify(user=user, is_library_card=True))

        storage = get_storage()
        roles = [role["role"] for role in storage.get_user_roles(user["id"])]
        return make_response(
            jsonify(
                user=user,
                profile=storage.get_profile(user["id"]),
                roles=roles,
                is_admin="admin" in roles,
            )
        )


@auth_namespace.route("/make-admin")
class MakeAdmin(Resource):
    @auth_namespace.expect(make_admin_input)
    @admin_required
    def post(self):
        """Make a user an admin"""
        data = request.json or {}
        storage = get_storage()
        user = storage.get_user_by_email(data.get("email", None))
        if not user or storage.has_role(user["id"], "admin"):
            return make_response(
                jsonify(error="User not found or already an admin"), HTTPStatus.NOT_FOUND
            )
        storage.create_user_role(user["id"], "admin")
        return make_response(jsonify(message="User is now an admin"), HTTPStatus.OK)


@auth_namespace.route("/profile")
class UserProfile(Resource):
    @jwt_required()
    def get(self):
        return make_response(jsonify(profile=get_storage().get_profile(get_jwt_identity())))

    @auth_namespace.expect(profile_input)
    @jwt_required()
    def put(self):
        if current_user["kind"] != USER:
            return make_response(
                jsonify(error="Only registered users have a profile"), HTTPStatus.BAD_REQUEST
            )
        data = request.json or {}
        changes = {name: data[name] for name in PROFILE_FIELDS if name in data}
        profile = get_storage().upsert_profile(current_user["id"], changes)
        return make_response(jsonify(profile=profile))
