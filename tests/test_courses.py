"""Course listing, CRUD and cascading deletion."""

import pytest

from core.exceptions import LMSError
from models.assignment import AssignmentModel
from models.enrollment import EnrollmentModel
from models.material import MaterialModel
from models.result import ResultModel

NEW_COURSE = {
    "title": "Operating Systems",
    "code": "CS301",
    "description": "Processes, memory and file systems.",
    "capacity": 25,
    "credits": 4,
    "level": "advanced",
    "category": "Computer Science",
}


class TestListing:
    def test_paginates(self, client):
        response = client.fetch("/api/courses?page=2&limit=2")
        assert [c["_id"] for c in response["data"]] == ["course3", "course4"]
        assert response["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}

    @pytest.mark.parametrize("query", ["page=0", "limit=0", "page=-1", "page=two"])
    def test_out_of_range_paging_is_rejected(self, client, query):
        with pytest.raises(LMSError) as exc:
            client.fetch(f"/api/courses?{query}")
        assert exc.value.code == "Validation"

    def test_default_page_holds_everything(self, client):
        response = client.fetch("/api/courses")
        assert len(response["data"]) == 5
        assert response["pagination"]["limit"] == 50

    def test_enrolled_counts_follow_seeded_enrollments(self, client):
        courses = {c["_id"]: c for c in client.fetch("/api/courses")["data"]}
        assert courses["course1"]["enrolled"] == 2
        assert courses["course3"]["enrolled"] == 1
        assert courses["course5"]["enrolled"] == 0

    def test_available_is_not_taken_for_an_identifier(self, client):
        response = client.fetch("/api/courses/available")
        assert len(response["data"]) == 5

    def test_available_skips_inactive_courses(self, client):
        client.fetch("/api/courses/course2", method="PATCH", body={"status": "archived"})
        ids = [c["_id"] for c in client.fetch("/api/courses/available")["data"]]
        assert "course2" not in ids

    def test_instructor_courses(self, client, login_as):
        login_as(client, "instructor")
        ids = [c["_id"] for c in client.fetch("/api/courses/instructor")["data"]]
        assert ids == ["course1", "course3", "course5"]


class TestCrud:
    def test_round_trip(self, client, login_as):
        login_as(client, "instructor")
        created = client.fetch("/api/courses", method="POST", body=NEW_COURSE)["data"]

        assert created["enrolled"] == 0
        assert created["instructor"] == {
            "_id": "instructor1",
            "firstName": "Dr. Sarah",
            "lastName": "Johnson",
            "email": "instructor@university.edu",
        }
        fetched = client.fetch(f"/api/courses/{created['_id']}")["data"]
        assert fetched == created

        updated = client.fetch(
            f"/api/courses/{created['_id']}", method="PUT", body={"capacity": 30}
        )["data"]
        assert updated["capacity"] == 30
        assert updated["title"] == NEW_COURSE["title"]

        client.fetch(f"/api/courses/{created['_id']}", method="DELETE")
        with pytest.raises(LMSError) as exc:
            client.fetch(f"/api/courses/{created['_id']}")
        assert exc.value.code == "CourseNotFound"

    def test_explicit_instructor(self, client):
        body = dict(NEW_COURSE, instructorId="instructor2")
        created = client.fetch("/api/courses", method="POST", body=body)["data"]
        assert created["instructor"]["_id"] == "instructor2"

    def test_instructor_field_names_an_instructor(self, client, login_as):
        login_as(client, "admin")
        body = {"title": "Compilers", "code": "CS410", "instructor": "instructor2", "capacity": 5}
        created = client.fetch("/api/courses", method="POST", body=body)["data"]
        assert created["instructor"]["_id"] == "instructor2"

        updated = client.fetch(
            f"/api/courses/{created['_id']}", method="PUT", body={"instructor": "instructor1"}
        )["data"]
        assert updated["instructor"]["_id"] == "instructor1"

    def test_update_resnapshots_instructor(self, client):
        updated = client.fetch(
            "/api/courses/course1", method="PATCH", body={"instructorId": "instructor2"}
        )["data"]
        assert updated["instructor"]["lastName"] == "Brown"

    def test_title_and_code_are_required(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/courses", method="POST", body={"code": "X1", "instructorId": "instructor1"}
            )
        assert exc.value.code == "Validation"

    def test_student_cannot_instruct(self, client):
        body = dict(NEW_COURSE, instructorId="student1")
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/courses", method="POST", body=body)
        assert exc.value.code == "Validation"

    def test_unknown_instructor(self, client):
        body = dict(NEW_COURSE, instructorId="nobody")
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/courses", method="POST", body=body)
        assert exc.value.code == "UserNotFound"

    def test_negative_capacity_is_rejected(self, client):
        body = dict(NEW_COURSE, instructorId="instructor1", capacity=-1)
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/courses", method="POST", body=body)
        assert exc.value.code == "Validation"

    def test_unknown_status_is_rejected(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/courses", method="POST", body=dict(NEW_COURSE, status="banana"))
        assert exc.value.code == "Validation"
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/courses/course1", method="PATCH", body={"status": "banana"})
        assert exc.value.code == "Validation"

    def test_update_unknown_course(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/courses/missing", method="PUT", body={"title": "X"})
        assert exc.value.code == "CourseNotFound"


class TestDeleteCascade:
    def test_dependent_records_go_with_the_course(self, router, db):
        router.fetch("/api/courses/course1", method="DELETE")

        assert db.query(EnrollmentModel).filter_by(course_id="course1").count() == 0
        assert db.query(AssignmentModel).filter_by(course_id="course1").count() == 0
        assert db.query(MaterialModel).filter_by(course_id="course1").count() == 0
        assert db.query(ResultModel).filter_by(course_id="course1").count() == 0
        # Other courses are untouched
        assert db.query(EnrollmentModel).filter_by(course_id="course2").count() == 2
