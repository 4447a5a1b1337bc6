"""User administration."""

import pytest

from core.exceptions import LMSError


class TestListing:
    def test_role_filter(self, client):
        response = client.fetch("/api/users?role=instructor")
        assert [u["_id"] for u in response["data"]] == ["instructor1", "instructor2"]
        assert response["pagination"]["total"] == 2

    def test_pagination(self, client):
        response = client.fetch("/api/users?page=2&limit=3")
        assert [u["_id"] for u in response["data"]] == ["student1", "student2", "student3"]
        assert response["pagination"] == {"page": 2, "limit": 3, "total": 8, "pages": 3}

    @pytest.mark.parametrize("query", ["page=0", "limit=0"])
    def test_out_of_range_paging_is_rejected(self, client, query):
        with pytest.raises(LMSError) as exc:
            client.fetch(f"/api/users?{query}")
        assert exc.value.code == "Validation"

    def test_students(self, client):
        students = client.fetch("/api/users/students")["data"]
        assert len(students) == 5
        assert {u["role"] for u in students} == {"student"}

    def test_no_password_material_is_exposed(self, client):
        client.fetch(
            "/api/auth/set-password",
            method="POST",
            body={"email": "student@university.edu", "password": "long-enough"},
        )
        user = client.fetch("/api/users/student1")["data"]
        assert not {"password", "passwordHash", "password_hash"} & set(user)

    def test_unknown_user(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/users/nobody")
        assert exc.value.code == "UserNotFound"


class TestCreate:
    def test_student_gets_next_student_identifier(self, client):
        user = client.fetch(
            "/api/users",
            method="POST",
            body={"firstName": "Lena", "lastName": "Park", "email": "lena.park@university.edu"},
        )["data"]
        assert user["role"] == "student"
        assert user["studentId"] == "STU006"
        assert user["instructorId"] is None

    def test_instructor_gets_next_instructor_identifier(self, client):
        user = client.fetch(
            "/api/users",
            method="POST",
            body={
                "firstName": "Omar",
                "lastName": "Haddad",
                "email": "omar.haddad@university.edu",
                "role": "instructor",
            },
        )["data"]
        assert user["instructorId"] == "INST003"
        assert user["studentId"] is None

    def test_unknown_role(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/users",
                method="POST",
                body={"firstName": "A", "lastName": "B", "email": "a.b@university.edu", "role": "dean"},
            )
        assert exc.value.code == "Validation"


class TestUpdate:
    def test_merges_fields(self, client):
        user = client.fetch(
            "/api/users/student2", method="PUT", body={"phone": "+1555000", "department": "Math"}
        )["data"]
        assert user["phone"] == "+1555000"
        assert user["department"] == "Math"
        assert user["firstName"] == "Jane"

    def test_status(self, client):
        user = client.fetch(
            "/api/users/student2/status", method="PATCH", body={"isActive": False}
        )["data"]
        assert user["isActive"] is False

    def test_delete(self, client):
        client.fetch("/api/users/student5", method="DELETE")
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/users/student5")
        assert exc.value.code == "UserNotFound"

    def test_delete_keeps_enrollment_snapshots(self, client):
        client.fetch("/api/users/student3", method="DELETE")
        enrollment = client.fetch("/api/enrollments/enrollment5")["data"]
        assert enrollment["student"]["firstName"] == "Alex"


class TestInstructorCourses:
    def test_reassigns_courses(self, client):
        courses = client.fetch(
            "/api/users/instructor2/instructor-courses",
            method="PATCH",
            body={"courseIds": ["course1", "course2"]},
        )["data"]
        assert [c["_id"] for c in courses] == ["course1", "course2"]
        assert client.fetch("/api/courses/course1")["data"]["instructor"]["_id"] == "instructor2"
        # Courses left out of the list lose this instructor
        assert client.fetch("/api/courses/course4")["data"]["instructor"] is None

    def test_requires_an_instructor(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/users/student1/instructor-courses",
                method="PATCH",
                body={"courseIds": ["course1"]},
            )
        assert exc.value.code == "Validation"

    def test_unknown_course(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/users/instructor1/instructor-courses",
                method="PATCH",
                body={"courseIds": ["course1", "missing"]},
            )
        assert exc.value.code == "CourseNotFound"
