"""Assignments, attachments and submissions."""

import pytest
from sqlalchemy.exc import OperationalError

from core.exceptions import LMSError
from utils.assignment_manager import AssignmentManager
from utils.file_storage import FileStorage, UploadedFile


def pdf(name="brief.pdf", content=b"%PDF-1.4 assignment brief"):
    return UploadedFile(filename=name, content=content, content_type="application/pdf")


class TestAssignments:
    def test_list_by_course(self, client):
        assignments = client.fetch("/api/assignments?course=course3")["data"]
        assert [a["_id"] for a in assignments] == ["assignment3"]

    def test_enrolled_assignments(self, client, login_as):
        login_as(client, "student")
        ids = [a["_id"] for a in client.fetch("/api/assignments/enrolled")["data"]]
        assert ids == ["assignment1", "assignment2"]

    def test_create_with_attachment(self, client, login_as, upload_dir):
        login_as(client, "instructor")
        assignment = client.fetch(
            "/api/assignments",
            method="POST",
            body={"title": "Sorting", "courseId": "course1", "maxScore": 50, "dueDate": "2024-06-01"},
            files={"file": pdf()},
        )["data"]

        assert assignment["maxPoints"] == 50
        assert assignment["course"]["_id"] == "course1"
        assert assignment["createdBy"]["_id"] == "instructor1"
        attachment = assignment["attachment"]
        assert attachment["originalName"] == "brief.pdf"
        assert attachment["url"] == f"/uploads/{attachment['fileName']}"
        assert (upload_dir / attachment["fileName"]).read_bytes() == b"%PDF-1.4 assignment brief"
        assert assignment["attachmentUrl"] == attachment["url"]
        assert assignment["attachmentName"] == "brief.pdf"

    def test_create_without_file(self, client):
        assignment = client.fetch(
            "/api/assignments", method="POST", body={"title": "Essay", "courseId": "course2"}
        )["data"]
        assert assignment["attachment"] is None
        assert assignment["maxPoints"] == 100

    def test_create_requires_title(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/assignments", method="POST", body={"courseId": "course1"})
        assert exc.value.code == "Validation"

    def test_unknown_status_is_rejected(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/assignments",
                method="POST",
                body={"title": "Essay", "courseId": "course2", "status": "published"},
            )
        assert exc.value.code == "Validation"

    def test_create_for_unknown_course(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/assignments", method="POST", body={"title": "X", "courseId": "missing"}
            )
        assert exc.value.code == "CourseNotFound"

    def test_new_attachment_replaces_the_old_one(self, client, upload_dir):
        created = client.fetch(
            "/api/assignments",
            method="POST",
            body={"title": "Graphs", "courseId": "course2"},
            files={"file": pdf("v1.pdf")},
        )["data"]
        old_name = created["attachment"]["fileName"]

        updated = client.fetch(
            f"/api/assignments/{created['_id']}",
            method="PUT",
            body={"title": "Graphs II"},
            files={"file": pdf("v2.pdf", b"second")},
        )["data"]

        assert updated["title"] == "Graphs II"
        assert updated["attachment"]["originalName"] == "v2.pdf"
        assert not (upload_dir / old_name).exists()


class TestSubmissions:
    def test_submit_resubmit_and_grade(self, client, login_as):
        login_as(client, "student")
        first = client.fetch(
            "/api/assignments/assignment1/submissions",
            method="POST",
            files={"file": pdf("answer.pdf")},
        )
        assert first["message"] == "Assignment submitted successfully"
        submission = first["data"]
        assert submission["status"] == "submitted"
        assert submission["student"]["_id"] == "student1"
        assert submission["assignment"] == "assignment1"
        assert submission["originalName"] == "answer.pdf"
        assert submission["fileName"] == submission["file"]["fileName"]
        assert submission["fileUrl"] == f"/uploads/{submission['fileName']}"

        graded = client.fetch(
            f"/api/assignments/assignment1/submissions/{submission['_id']}",
            method="PATCH",
            body={"grade": "A", "remarks": "Well done"},
        )["data"]
        assert (graded["status"], graded["grade"], graded["remarks"]) == ("graded", "A", "Well done")

        again = client.fetch(
            "/api/assignments/assignment1/submissions",
            method="POST",
            files={"file": pdf("answer-v2.pdf")},
        )["data"]
        assert again["_id"] == submission["_id"]
        assert again["status"] == "submitted"
        assert again["grade"] is None
        assert again["file"]["originalName"] == "answer-v2.pdf"
        assert len(client.fetch("/api/assignments/assignment1/submissions")["data"]) == 1

    def test_session_student_submissions(self, client, login_as):
        login_as(client, "student")
        client.fetch(
            "/api/assignments/assignment2/submissions", method="POST", files={"file": pdf()}
        )
        submissions = client.fetch("/api/assignments/submissions")["data"]
        assert [s["assignmentId"] for s in submissions] == ["assignment2"]

    def test_file_is_required(self, client, login_as):
        login_as(client, "student")
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/assignments/assignment1/submissions", method="POST", body={})
        assert exc.value.code == "Validation"

    def test_requires_a_session(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/assignments/assignment1/submissions", method="POST", files={"file": pdf()}
            )
        assert exc.value.code == "NotAuthenticated"

    def test_unknown_submission(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/assignments/assignment1/submissions/missing",
                method="PATCH",
                body={"grade": "B"},
            )
        assert exc.value.code == "SubmissionNotFound"

    def test_delete_submission(self, client, login_as, upload_dir):
        login_as(client, "student")
        submission = client.fetch(
            "/api/assignments/assignment1/submissions", method="POST", files={"file": pdf()}
        )["data"]
        client.fetch(
            f"/api/assignments/assignment1/submissions/{submission['_id']}", method="DELETE"
        )
        assert client.fetch("/api/assignments/assignment1/submissions")["data"] == []
        assert not (upload_dir / submission["file"]["fileName"]).exists()


class TestDownloadSubmission:
    def test_in_process_returns_the_file(self, router, login_as):
        login_as(router, "student")
        submission = router.fetch(
            "/api/assignments/assignment1/submissions",
            method="POST",
            files={"file": pdf("answer.pdf", b"my answer")},
        )["data"]

        response = router.fetch(
            f"/api/assignments/assignment1/submissions/{submission['_id']}/download"
        )
        assert response["content"] == b"my answer"
        assert response["data"]["originalName"] == "answer.pdf"

    def test_http_streams_the_file(self, api_client, http, login_as):
        login_as(api_client, "student")
        submission = api_client.fetch(
            "/api/assignments/assignment1/submissions",
            method="POST",
            files={"file": pdf("answer.pdf", b"my answer")},
        )["data"]

        response = http.get(
            f"/api/assignments/assignment1/submissions/{submission['_id']}/download"
        )
        assert response.status_code == 200
        assert response.content == b"my answer"
        assert response.headers["content-type"] == "application/pdf"
        assert "answer.pdf" in response.headers["content-disposition"]

    def test_unknown_submission(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/assignments/assignment1/submissions/missing/download")
        assert exc.value.code == "SubmissionNotFound"


class TestSubmitCommitFailure:
    def test_stored_file_is_removed(self, db, upload_dir, monkeypatch):
        manager = AssignmentManager(db, FileStorage(upload_dir))

        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db, "commit", failing_commit)
        with pytest.raises(OperationalError):
            manager.submit("assignment1", "student1", pdf("answer.pdf"))

        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


class TestDeleteAssignment:
    def test_submissions_and_files_go_with_it(self, client, login_as, upload_dir):
        login_as(client, "student")
        submission = client.fetch(
            "/api/assignments/assignment1/submissions", method="POST", files={"file": pdf()}
        )["data"]

        client.fetch("/api/assignments/assignment1", method="DELETE")

        with pytest.raises(LMSError) as exc:
            client.fetch("/api/assignments/assignment1/submissions")
        assert exc.value.code == "AssignmentNotFound"
        assert client.fetch("/api/assignments/submissions")["data"] == []
        assert not (upload_dir / submission["file"]["fileName"]).exists()
