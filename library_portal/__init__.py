import logging
from http import HTTPStatus

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_restx import Api

from config import config_dict
from library_portal.auth.oauth import load_session_user
from library_portal.auth.routes import auth_namespace
from library_portal.borrows import borrow_namespace
from library_portal.cards import card_namespace
from library_portal.cards.lifecycle import CardApplications
from library_portal.contact import contact_namespace
from library_portal.donations import donation_namespace
from library_portal.exceptions import ConflictError, StorageError, ValidationError
from library_portal.notes import notes_namespace
from library_portal.rare_books import rare_books_namespace
from library_portal.reports import reports_namespace
from library_portal.storage import make_storage

logger = logging.getLogger(__name__)


def create_app(config=config_dict["dev"], storage=None):
    app = Flask(__name__)
    CORS(app, origins="*")
    app.config.from_object(config)
    logging.basicConfig(
        level=app.config["LOG_LEVEL"], format="%(asctime)s - %(levelname)s - %(message)s"
    )

    authorizations = {
        "Bearer Auth": {
            "type": "apiKey",
            "in": "header",
            "name": "Authorization",
            "description": "add a JWT with ** Bearer &lt;JWT&gt; to authorize",
        }
    }

    api = Api(app, authorizations=authorizations, security="Bearer Auth")
    jwt = JWTManager(app)

    if storage is None:
        storage = make_storage(config)
        storage.init()
    logger.info("Using %s", type(storage).__name__)
    app.extensions["storage"] = storage
    app.extensions["card_applications"] = CardApplications(
        storage, validity_days=app.config["CARD_VALIDITY_DAYS"]
    )

    @jwt.user_lookup_loader
    def user_lookup_callback(_jwt_header, jwt_data):
        return load_session_user(jwt_data["sub"], jwt_data.get("kind"))

    @api.errorhandler(ValidationError)
    def handle_validation_error(error):
        return {"error": str(error), "fields": error.fields}, HTTPStatus.BAD_REQUEST

    @api.errorhandler(ConflictError)
    def handle_conflict_error(error):
        return {"error": str(error)}, HTTPStatus.CONFLICT

    @api.errorhandler(StorageError)
    def handle_storage_error(error):
        return {"error": "Storage failure"}, HTTPStatus.INTERNAL_SERVER_ERROR

    api.add_namespace(auth_namespace, path="/api")
    api.add_namespace(card_namespace, path="/api")
    api.add_namespace(borrow_namespace, path="/api")
    api.add_namespace(contact_namespace, path="/api")
    api.add_namespace(donation_namespace, path="/api")
    api.add_namespace(notes_namespace, path="/api")
    api.add_namespace(rare_books_namespace, path="/api")
    api.add_namespace(reports_namespace, path="/api")

    return app
