from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import PersistenceError, ValidationError


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service
    reports = container.report_service

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(e: PersistenceError):
        # Session state is kept; the operator can retry the submit.
        return jsonify({"success": False, "message": str(e)}), 503

    @app.route("/api/attendance/session", methods=["POST"], endpoint="attendance_start")
    def start_session():
        attendance.start_session()
        return jsonify({"success": True, "session": attendance.session_view()}), 201

    @app.route("/api/attendance/session", methods=["GET"], endpoint="attendance_session")
    def get_session():
        return jsonify({"success": True, "session": attendance.session_view()})

    @app.route("/api/attendance/session", methods=["DELETE"], endpoint="attendance_exit")
    def exit_session():
        attendance.exit_session()
        return "", 204

    @app.route("/api/attendance/session/toggle", methods=["POST"], endpoint="attendance_toggle")
    def toggle_status():
        data = request.get_json(silent=True) or {}
        student = str(data.get("student", "")).strip()
        if not student:
            raise ValidationError("Student name must not be empty")
        if student not in attendance.roster:
            raise ValidationError(f"Unknown student: {student}")

        changed = attendance.toggle(student)
        return jsonify({"success": True, "changed": changed, "session": attendance.session_view()})

    @app.route("/api/attendance/session/submit", methods=["POST"], endpoint="attendance_submit")
    def submit():
        record = attendance.submit()
        return jsonify({"success": True, "record": record.to_dict(), "counts": record.counts()}), 201

    @app.route("/api/attendance/records", methods=["GET"], endpoint="attendance_records")
    def previous_report():
        return jsonify({"success": True, "records": reports.previous_report()})

    @app.route("/api/attendance/dashboard", methods=["GET"], endpoint="attendance_dashboard")
    def dashboard():
        return jsonify({"success": True, **reports.dashboard()})
