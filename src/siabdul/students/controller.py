from __future__ import annotations

import csv
import io

import qrcode
from flask import Flask, jsonify, request, send_file

from ..common.web import fail, json_body, login_required
from ..core.exceptions import ValidationError
from ..container import Container
from .model import Student
from .service import CSV_COLUMNS


def student_to_dict(s: Student) -> dict:
    return {
        "id": s.student_id,
        "nisn": s.code,
        "name": s.name,
        "grade": s.class_label,
        "avatar": s.avatar,
        "parentPhone": s.guardian_phone,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="api_students")
    @login_required
    def api_students():
        class_label = (request.args.get("class") or "").strip() or None
        students = container.roster_service.list_students(class_label)
        return jsonify({"success": True, "students": [student_to_dict(s) for s in students]})

    @app.route("/api/students", methods=["POST"], endpoint="api_save_student")
    @login_required
    def api_save_student():
        data = json_body()
        try:
            student = container.roster_service.save_student(
                student_id=str(data.get("id") or "").strip() or None,
                name=str(data.get("name", "")),
                code=str(data.get("nisn", "")),
                class_label=str(data.get("grade", "")),
                guardian_phone=str(data.get("parentPhone") or ""),
                avatar=data.get("avatar") or None,
            )
        except ValidationError as e:
            return fail(str(e))
        return jsonify({"success": True, "message": "Data siswa disimpan", "student": student_to_dict(student)})

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="api_delete_student")
    @login_required
    def api_delete_student(student_id: str):
        try:
            removed = container.roster_service.delete_student(student_id)
        except ValidationError as e:
            return fail(str(e), 404)
        return jsonify({"success": True, "message": "Siswa dihapus", "removedRecords": removed})

    @app.route("/api/students/<student_id>/qr.png", methods=["GET"], endpoint="api_student_qr")
    @login_required
    def api_student_qr(student_id: str):
        try:
            student = container.roster_service.get_student(student_id)
        except ValidationError as e:
            return fail(str(e), 404)

        # The student card carries the NISN; the scan engine resolves it first.
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(student.code)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png", download_name=f"{student.code}.png")

    @app.route("/api/students/import", methods=["POST"], endpoint="api_import_students")
    @login_required
    def api_import_students():
        upload = request.files.get("file")
        if upload is None:
            return fail("File CSV belum dipilih")
        class_label = (request.form.get("class") or "").strip()
        try:
            text = upload.read().decode("utf-8-sig")
        except UnicodeDecodeError:
            return fail("File harus berformat CSV (UTF-8)")

        try:
            result = container.roster_service.import_students(csv.DictReader(io.StringIO(text)), class_label=class_label)
        except ValidationError as e:
            return fail(str(e))
        return jsonify(
            {
                "success": True,
                "message": f"Berhasil mengimpor {result.imported} siswa.",
                "imported": result.imported,
                "skipped": result.skipped,
                "errors": list(result.errors),
            }
        )

    @app.route("/api/students/template.csv", methods=["GET"], endpoint="api_students_template")
    @login_required
    def api_students_template():
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=list(CSV_COLUMNS))
        writer.writeheader()
        writer.writerow({"Name": "Contoh Siswa", "NISN": "0012345678", "ParentPhone": "6281234567890"})
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=Template_Import_Siswa.csv"},
        )

    @app.route("/api/classes", methods=["GET"], endpoint="api_classes")
    @login_required
    def api_classes():
        return jsonify({"success": True, "classes": container.roster_service.list_classes()})

    @app.route("/api/classes", methods=["POST"], endpoint="api_add_class")
    @login_required
    def api_add_class():
        try:
            container.roster_service.add_class(str(json_body().get("name", "")))
        except ValidationError as e:
            return fail(str(e))
        return jsonify({"success": True, "classes": container.roster_service.list_classes()})

    @app.route("/api/classes/<path:label>", methods=["PUT"], endpoint="api_rename_class")
    @login_required
    def api_rename_class(label: str):
        try:
            moved = container.roster_service.rename_class(label, str(json_body().get("name", "")))
        except ValidationError as e:
            return fail(str(e))
        return jsonify({"success": True, "relabeled": moved, "classes": container.roster_service.list_classes()})

    @app.route("/api/classes/<path:label>", methods=["DELETE"], endpoint="api_delete_class")
    @login_required
    def api_delete_class(label: str):
        try:
            container.roster_service.delete_class(label)
        except ValidationError as e:
            return fail(str(e))
        return jsonify({"success": True, "classes": container.roster_service.list_classes()})
