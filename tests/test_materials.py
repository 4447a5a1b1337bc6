"""Course materials and file type classification."""

import pytest

from core.exceptions import LMSError
from utils.file_storage import UploadedFile, classify_file_type


@pytest.mark.parametrize(
    "mime_type, filename, expected",
    [
        ("application/pdf", "notes.pdf", "pdf"),
        (None, "notes.PDF", "pdf"),
        ("video/mp4", "lecture.mp4", "video"),
        ("image/png", "diagram.png", "image"),
        (
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "essay.docx",
            "docx",
        ),
        ("text/plain", "readme.txt", "document"),
        ("application/octet-stream", "lecture.mp4", "video"),
        ("application/octet-stream", "archive.bin", "other"),
    ],
)
def test_classify_file_type(mime_type, filename, expected):
    assert classify_file_type(mime_type, filename) == expected


class TestMaterials:
    def test_list_by_course(self, client):
        materials = client.fetch("/api/materials?course=course2")["data"]
        assert [m["_id"] for m in materials] == ["material2"]
        assert materials[0]["fileType"] == "video"

    def test_enrolled_materials(self, client, login_as):
        login_as(client, "student")
        ids = [m["_id"] for m in client.fetch("/api/materials/enrolled")["data"]]
        assert ids == ["material1", "material2"]

    def test_dropped_courses_are_left_out(self, client, login_as):
        client.fetch("/api/enrollments/enrollment2", method="PATCH", body={"status": "dropped"})
        login_as(client, "student")
        ids = [m["_id"] for m in client.fetch("/api/materials/enrolled")["data"]]
        assert ids == ["material1"]

    def test_upload(self, client, login_as, upload_dir):
        login_as(client, "instructor")
        material = client.fetch(
            "/api/materials",
            method="POST",
            body={"title": "Week 1 slides", "courseId": "course1", "description": "Intro"},
            files={"file": UploadedFile("slides.pdf", b"%PDF-1.7 slides", "application/pdf")},
        )["data"]

        assert material["fileType"] == "pdf"
        assert material["originalName"] == "slides.pdf"
        assert material["mimeType"] == "application/pdf"
        assert material["size"] == len(b"%PDF-1.7 slides")
        assert material["fileUrl"] == f"/uploads/{material['fileName']}"
        assert material["uploadedBy"]["_id"] == "instructor1"
        assert (upload_dir / material["fileName"]).exists()

    def test_explicit_file_type_wins(self, client):
        material = client.fetch(
            "/api/materials",
            method="POST",
            body={"title": "Reading", "courseId": "course3", "fileType": "document"},
            files={"file": UploadedFile("reading.pdf", b"pdf bytes", "application/pdf")},
        )["data"]
        assert material["fileType"] == "document"

    def test_unknown_file_type_is_rejected(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/materials",
                method="POST",
                body={"title": "Reading", "courseId": "course3", "fileType": "spreadsheet"},
                files={"file": UploadedFile("reading.pdf", b"pdf bytes", "application/pdf")},
            )
        assert exc.value.code == "Validation"

    def test_requires_course(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/materials", method="POST", body={"title": "Orphan"})
        assert exc.value.code == "Validation"

    def test_update_metadata(self, client):
        material = client.fetch(
            "/api/materials/material3", method="PATCH", body={"title": "HTML Style Guide"}
        )["data"]
        assert material["title"] == "HTML Style Guide"
        assert material["fileName"] == "html_best_practices.docx"

    def test_delete_removes_the_file(self, client, upload_dir):
        material = client.fetch(
            "/api/materials",
            method="POST",
            body={"title": "Temp", "courseId": "course1"},
            files={"file": UploadedFile("temp.txt", b"scratch", "text/plain")},
        )["data"]
        stored = upload_dir / material["fileName"]
        assert stored.exists()

        client.fetch(f"/api/materials/{material['_id']}", method="DELETE")

        assert not stored.exists()
        with pytest.raises(LMSError) as exc:
            client.fetch(f"/api/materials/{material['_id']}")
        assert exc.value.code == "MaterialNotFound"
