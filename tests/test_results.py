"""Result grading and the results endpoints."""

import pytest

from core.exceptions import InvalidScoreError, LMSError
from utils.result_manager import compute_result, grade_for, round_half_up


class TestGrading:
    @pytest.mark.parametrize(
        "ca, final, expected",
        [
            (80, 90, (86, "A", "passed")),
            (40, 40, (40, "D", "failed")),
            (88, 96, (93, "A+", "passed")),
            (100, 100, (100, "A+", "passed")),
            (0, 0, (0, "F", "failed")),
        ],
    )
    def test_compute_result(self, ca, final, expected):
        assert compute_result(ca, final) == expected

    @pytest.mark.parametrize(
        "percentage, grade",
        [
            (90, "A+"), (89, "A"), (85, "A"), (80, "A-"), (75, "B+"), (70, "B"),
            (65, "B-"), (60, "C+"), (55, "C"), (50, "C-"), (45, "D+"), (40, "D"), (39, "F"),
        ],
    )
    def test_breakpoints(self, percentage, grade):
        assert grade_for(percentage) == grade

    def test_rounds_half_up(self):
        assert round_half_up(59.5) == 60
        assert round_half_up(86.4) == 86
        assert round_half_up(0.5) == 1

    @pytest.mark.parametrize("ca, final", [(-1, 50), (50, 100.5)])
    def test_scores_outside_range(self, ca, final):
        with pytest.raises(InvalidScoreError):
            compute_result(ca, final)


class TestSeededResults:
    def test_grades_are_derived_from_scores(self, client):
        result = client.fetch("/api/results/result1")["data"]
        assert (result["finalPercentage"], result["finalGrade"], result["status"]) == (93, "A+", "passed")
        assert result["student"]["studentId"] == "STU001"

    def test_missing_final_exam_is_pending(self, client):
        result = client.fetch("/api/results/result3")["data"]
        assert result["status"] == "pending"
        assert result["finalPercentage"] is None
        assert result["finalGrade"] is None

    def test_filters(self, client):
        by_student = client.fetch("/api/results?student=student1")["data"]
        assert [r["_id"] for r in by_student] == ["result1", "result3"]
        by_both = client.fetch("/api/results?student=student1&course=course2")["data"]
        assert [r["_id"] for r in by_both] == ["result3"]

    def test_session_student_results(self, client, login_as):
        login_as(client, "student")
        ids = [r["_id"] for r in client.fetch("/api/results/student/me")["data"]]
        assert ids == ["result1", "result3"]


class TestUpsert:
    def test_creates_and_grades(self, client):
        result = client.fetch(
            "/api/results",
            method="POST",
            body={"studentId": "student3", "courseId": "course2", "caScore": 80, "finalExamScore": 90},
        )["data"]
        assert (result["finalPercentage"], result["finalGrade"], result["status"]) == (86, "A", "passed")
        assert result["course"]["code"] == "CS201"

    def test_second_call_updates_the_same_result(self, client):
        body = {"student": "student1", "course": "course2", "caScore": 85, "finalExamScore": 40}
        result = client.fetch("/api/results", method="POST", body=body)["data"]

        assert result["_id"] == "result3"
        assert (result["finalPercentage"], result["finalGrade"], result["status"]) == (58, "C", "failed")
        assert len(client.fetch("/api/results?student=student1&course=course2")["data"]) == 1

    def test_without_final_exam_stays_pending(self, client):
        result = client.fetch(
            "/api/results",
            method="POST",
            body={"studentId": "student4", "courseId": "course4", "caScore": 70},
        )["data"]
        assert result["status"] == "pending"
        assert result["finalGrade"] is None

    def test_invalid_score(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/results",
                method="POST",
                body={"studentId": "student4", "courseId": "course4", "caScore": 101, "finalExamScore": 50},
            )
        assert exc.value.code == "InvalidScore"
        assert exc.value.status_code == 400
        assert client.fetch("/api/results?student=student4")["data"] == []

    def test_unknown_student(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch(
                "/api/results", method="POST", body={"studentId": "nobody", "courseId": "course1"}
            )
        assert exc.value.code == "UserNotFound"


class TestUpdateAndDelete:
    def test_update_recomputes(self, client):
        result = client.fetch(
            "/api/results/result3", method="PATCH", body={"finalExamScore": 75}
        )["data"]
        # 85 * 0.4 + 75 * 0.6 = 79
        assert (result["finalPercentage"], result["finalGrade"], result["status"]) == (79, "B+", "passed")

    def test_update_rejects_invalid_score(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/results/result1", method="PUT", body={"caScore": -5})
        assert exc.value.code == "InvalidScore"
        assert client.fetch("/api/results/result1")["data"]["caScore"] == 88

    def test_delete(self, client):
        client.fetch("/api/results/result2", method="DELETE")
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/results/result2")
        assert exc.value.code == "ResultNotFound"
