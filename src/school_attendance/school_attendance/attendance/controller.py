from __future__ import annotations

import io
from datetime import date, datetime
from typing import Optional

from flask import Flask, g, jsonify, request, send_file

from ..common.datetime_utils import parse_hhmm, parse_iso_date, parse_iso_datetime
from ..common.http import json_body, token_required
from ..container import Container
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..students.qr import decode_qr_image, render_qr_png
from .model import AttendanceRecord


def _record_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "student_id": r.student_id,
        "date": r.work_date.isoformat(),
        "check_in_time": r.check_in_time.isoformat() if r.check_in_time else None,
        "check_out_time": r.check_out_time.isoformat() if r.check_out_time else None,
        "status": r.status.value,
        "note": r.note,
        "recorded_by": r.recorded_by,
    }


def _parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {value!r}") from None


def _parse_student_id(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("student_id must be an integer") from None


def _parse_date(value) -> date:
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError("date must be YYYY-MM-DD") from None


def _parse_optional_datetime(value, work_date: Optional[date], tz_name: Optional[str] = None) -> Optional[datetime]:
    """Accept an ISO timestamp, or HH:MM on ``work_date``.

    Timestamps carrying an offset are converted to ``tz_name`` first.
    """

    if value in (None, ""):
        return None
    text = str(value).strip()
    if len(text) <= 5 and work_date is None:
        raise ValidationError("HH:MM times need a date; send an ISO timestamp instead")
    try:
        if len(text) <= 5:
            return datetime.combine(work_date, parse_hhmm(text))
        return parse_iso_datetime(text, tz_name)
    except ValueError:
        raise ValidationError(f"Invalid time value: {value!r}") from None


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    attendance = container.attendance_service
    staff_required = token_required(auth, Role.ADMIN, Role.TEACHER)
    tz_name = container.timezone

    def _scan_response(code: str):
        record = attendance.handle_qr_scan(code, g.claims.user_id)
        action = "check_out" if record.check_out_time else "check_in"
        return jsonify({"success": True, "action": action, "record": _record_json(record)}), 200

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    @staff_required
    def api_attendance_scan():
        """QR check-in/checkout: the first scan of the day checks in, the second checks out."""
        data = json_body()
        return _scan_response(str(data.get("qr_code", "")))

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="api_attendance_scan_image")
    @staff_required
    def api_attendance_scan_image():
        """Same as /scan, but decodes the QR code from an uploaded image."""
        if "image" not in request.files:
            raise ValidationError("Missing image file")
        return _scan_response(decode_qr_image(request.files["image"].stream))

    @app.route("/api/attendance/manual", methods=["POST"], endpoint="api_attendance_manual")
    @staff_required
    def api_attendance_manual():
        data = json_body()
        if "student_id" not in data or "date" not in data or "status" not in data:
            raise ValidationError("student_id, date and status are required")

        work_date = _parse_date(data["date"])
        record = attendance.record_manual_attendance(
            _parse_student_id(data["student_id"]),
            work_date,
            _parse_status(data["status"]),
            recorded_by=g.claims.user_id,
            check_in_time=_parse_optional_datetime(data.get("check_in_time"), work_date, tz_name),
            check_out_time=_parse_optional_datetime(data.get("check_out_time"), work_date, tz_name),
            note=data.get("note"),
        )
        return jsonify({"success": True, "record": _record_json(record)}), 200

    @app.route("/api/attendance/<int:attendance_id>", methods=["PATCH"], endpoint="api_attendance_correct")
    @staff_required
    def api_attendance_correct(attendance_id: int):
        data = json_body()
        work_date = _parse_date(data["date"]) if data.get("date") else None

        changes = {}
        if "status" in data:
            changes["status"] = _parse_status(data["status"])
        if "check_in_time" in data:
            changes["check_in_time"] = _parse_optional_datetime(data["check_in_time"], work_date, tz_name)
        if "check_out_time" in data:
            changes["check_out_time"] = _parse_optional_datetime(data["check_out_time"], work_date, tz_name)
        if "note" in data:
            changes["note"] = data["note"]

        record = attendance.correct_attendance(attendance_id, recorded_by=g.claims.user_id, **changes)
        return jsonify({"success": True, "record": _record_json(record)}), 200

    @app.route(
        "/api/students/<int:student_id>/attendance/<work_date>",
        methods=["GET"],
        endpoint="api_student_attendance_day",
    )
    @staff_required
    def api_student_attendance_day(student_id: int, work_date: str):
        record = attendance.get_record(student_id, _parse_date(work_date))
        if not record:
            raise NotFoundError("No attendance recorded for that day")
        return jsonify({"success": True, "record": _record_json(record)}), 200

    @app.route("/api/students/<int:student_id>/qr.png", methods=["GET"], endpoint="api_student_qr_image")
    @staff_required
    def api_student_qr_image(student_id: int):
        """Printable QR card image for a student."""
        student = container.students_repo.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return send_file(io.BytesIO(render_qr_png(student.qr_code)), mimetype="image/png")
