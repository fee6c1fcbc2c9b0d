from http import HTTPStatus

from flask import jsonify, make_response, request
from flask_restx import Namespace, Resource, fields

from library_portal.auth.oauth import admin_required
from library_portal.utils import get_storage

notes_namespace = Namespace("Notes", description="Class notes repository", path="/")

NOTE_FIELDS = ("student_class", "subject", "title", "description", "pdf_path", "status")

note_input = notes_namespace.model(
    "NoteInput",
    {
        "class": fields.String(required=True, description="Class"),
        "subject": fields.String(required=True, description="Subject"),
        "title": fields.String(required=True, description="Title"),
        "description": fields.String(required=True, description="Description"),
        "pdf_path": fields.String(required=True, description="Path of the uploaded PDF"),
        "status": fields.String(description="Status", enum=["active", "inactive"]),
    },
)


def note_fields(data):
    data = dict(data)
    if "class" in data:
        data.setdefault("student_class", data.pop("class"))
    return {name: data[name] for name in NOTE_FIELDS if name in data}


@notes_namespace.route("/notes")
class ActiveNotes(Resource):
    def get(self):
        return make_response(jsonify(notes=get_storage().get_active_notes()))


@notes_namespace.route("/notes/filter")
@notes_namespace.doc(params={"class": "Class", "subject": "Subject"})
class FilteredNotes(Resource):
    def get(self):
        student_class = request.args.get("class")
        subject = request.args.get("subject")
        if not student_class or not subject:
            return make_response(
                jsonify(error="Class and subject required"), HTTPStatus.BAD_REQUEST
            )
        notes = get_storage().get_notes_by_class_and_subject(student_class, subject)
        return make_response(jsonify(notes=notes))


@notes_namespace.route("/admin/notes")
class AdminNotes(Resource):
    @admin_required
    def get(self):
        return make_response(jsonify(notes=get_storage().get_notes()))

    @notes_namespace.expect(note_input)
    @admin_required
    def post(self):
        note = note_fields(request.json or {})
        required = ("student_class", "subject", "title", "description", "pdf_path")
        if not all(note.get(name) for name in required):
            return make_response(
                jsonify(error="Missing required fields or file"), HTTPStatus.BAD_REQUEST
            )
        note.setdefault("status", "active")
        return make_response(jsonify(note=get_storage().create_note(note)), HTTPStatus.CREATED)


@notes_namespace.route("/admin/notes/<string:note_id>")
@notes_namespace.doc(params={"note_id": "Note ID"})
class AdminNote(Resource):
    @notes_namespace.expect(note_input)
    @admin_required
    def patch(self, note_id):
        note = get_storage().update_note(note_id, note_fields(request.json or {}))
        if note is None:
            return make_response(jsonify(error="Note not found"), HTTPStatus.NOT_FOUND)
        return make_response(jsonify(note=note))

    @admin_required
    def delete(self, note_id):
        get_storage().delete_note(note_id)
        return make_response(jsonify(success=True))


@notes_namespace.route("/admin/notes/<string:note_id>/toggle")
@notes_namespace.doc(params={"note_id": "Note ID"})
class ToggleNote(Resource):
    @admin_required
    def patch(self, note_id):
        note = get_storage().toggle_note_status(note_id)
        if note is None:
            return make_response(jsonify(error="Note not found"), HTTPStatus.NOT_FOUND)
        return make_response(jsonify(note=note))
