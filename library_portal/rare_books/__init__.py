from http import HTTPStatus

from flask import jsonify, make_response, request
from flask_restx import Namespace, Resource, fields

from library_portal.auth.oauth import admin_required
from library_portal.utils import get_storage

rare_books_namespace = Namespace("Rare Books", description="Rare book repository", path="/")

rare_book_input = rare_books_namespace.model(
    "RareBookInput",
    {
        "title": fields.String(required=True, description="Title"),
        "description": fields.String(required=True, description="Description"),
        "category": fields.String(description="Category", default="General"),
        "pdf_path": fields.String(required=True, description="Path of the uploaded PDF"),
        "status": fields.String(description="Status", enum=["active", "inactive"]),
    },
)


@rare_books_namespace.route("/rare-books")
class ActiveRareBooks(Resource):
    def get(self):
        return make_response(jsonify(rare_books=get_storage().get_active_rare_books()))


@rare_books_namespace.route("/admin/rare-books")
class AdminRareBooks(Resource):
    @admin_required
    def get(self):
        return make_response(jsonify(rare_books=get_storage().get_rare_books()))

    @rare_books_namespace.expect(rare_book_input)
    @admin_required
    def post(self):
        data = request.json or {}
        title = data.get("title", None)
        description = data.get("description", None)
        pdf_path = data.get("pdf_path", None)
        if not all([title, description, pdf_path]):
            return make_response(
                jsonify(error="Missing required fields or file"), HTTPStatus.BAD_REQUEST
            )
        book = get_storage().create_rare_book(
            {
                "title": title,
                "description": description,
                "category": data.get("category") or "General",
                "pdf_path": pdf_path,
                "status": data.get("status") or "active",
            }
        )
        return make_response(jsonify(rare_book=book), HTTPStatus.CREATED)


@rare_books_namespace.route("/admin/rare-books/<string:book_id>")
@rare_books_namespace.doc(params={"book_id": "Rare Book ID"})
class AdminRareBook(Resource):
    @admin_required
    def delete(self, book_id):
        get_storage().delete_rare_book(book_id)
        return make_response(jsonify(success=True))


@rare_books_namespace.route("/admin/rare-books/<string:book_id>/toggle")
@rare_books_namespace.doc(params={"book_id": "Rare Book ID"})
class ToggleRareBook(Resource):
    @admin_required
    def patch(self, book_id):
        book = get_storage().toggle_rare_book_status(book_id)
        if book is None:
            return make_response(jsonify(error="Rare book not found"), HTTPStatus.NOT_FOUND)
        return make_response(jsonify(rare_book=book))
