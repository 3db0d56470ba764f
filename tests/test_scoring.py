from types import SimpleNamespace

from lms.core.config import settings
from lms.models.submission import Submission
from lms.services.submission_service import score_answers
from tests.conftest import auth_headers, make_assignment


def _q(qid, correct):
    return SimpleNamespace(id=qid, correct_option_id=correct)


class TestScoreAnswers:
    def test_counts_matching_answers(self):
        questions = [_q(1, 10), _q(2, 20), _q(3, 30)]
        assert score_answers(questions, {1: 10, 2: 21, 3: 30}) == 2

    def test_unanswered_question_with_correct_option_scores_zero(self):
        assert score_answers([_q(1, 10)], {}) == 0

    def test_no_correct_option_and_no_answer_counts(self):
        # both sides are None in the default mode
        assert score_answers([_q(1, None)], {}) == 1

    def test_option_zero_reads_as_no_answer(self):
        assert score_answers([_q(1, None)], {1: 0}) == 1
        assert score_answers([_q(1, 10)], {1: 0}) == 0
        assert score_answers([_q(1, None)], {1: 0}, strict=True) == 0

    def test_strict_mode_ignores_questions_without_correct_option(self):
        questions = [_q(1, None), _q(2, 20)]
        assert score_answers(questions, {2: 20}, strict=True) == 1
        assert score_answers(questions, {}, strict=True) == 0

    def test_answers_for_unknown_questions_are_ignored(self):
        assert score_answers([_q(1, 10)], {1: 10, 99: 5}) == 1


class TestSubmissionEndpoint:
    def test_score_and_caller_is_submitter(self, client, db_session, student, other_student, assignment):
        q1, q2 = assignment.questions
        right = {q.id: next(o.id for o in q.options if o.is_correct) for q in (q1, q2)}
        wrong_q2 = next(o.id for o in q2.options if not o.is_correct)

        resp = client.post(
            "/submissions",
            json={
                "assignment_id": assignment.id,
                "user_id": other_student.id,
                "answers": {str(q1.id): right[q1.id], str(q2.id): wrong_q2},
            },
            headers=auth_headers(student),
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["score"] == 1
        assert body["user_id"] == student.id, "user id comes from the token, not the body"

    def test_each_call_adds_a_row(self, client, db_session, student, assignment):
        for _ in range(3):
            client.post(
                "/submissions",
                json={"assignment_id": assignment.id, "answers": {}},
                headers=auth_headers(student),
            )
        assert db_session.query(Submission).count() == 3

    def test_missing_assignment(self, client, student):
        resp = client.post(
            "/submissions", json={"assignment_id": 999, "answers": {}}, headers=auth_headers(student)
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == "assignment_not_found"

    def test_question_without_correct_option(self, client, db_session, student, course, monkeypatch):
        quiz = make_assignment(db_session, course, title="Broken", correct=(False,))

        resp = client.post(
            "/submissions", json={"assignment_id": quiz.id, "answers": {}}, headers=auth_headers(student)
        )
        assert resp.json()["score"] == 1

        monkeypatch.setattr(settings, "STRICT_SCORING", True)
        resp = client.post(
            "/submissions", json={"assignment_id": quiz.id, "answers": {}}, headers=auth_headers(student)
        )
        assert resp.json()["score"] == 0

    def test_auto_recompute_enqueues_job(self, client, student, assignment, course, monkeypatch):
        calls = []
        monkeypatch.setattr(settings, "AUTO_RECOMPUTE_PROGRESS", True)
        monkeypatch.setattr(
            "lms.workers.queue.enqueue_progress_task",
            lambda user_id, course_id: calls.append((user_id, course_id)) or "job-1",
        )

        resp = client.post(
            "/submissions",
            json={"assignment_id": assignment.id, "answers": {}},
            headers=auth_headers(student),
        )
        assert resp.status_code == 201
        assert calls == [(student.id, course.id)]


class TestSubmissionListing:
    def _submit(self, client, user, assignment):
        client.post(
            "/submissions",
            json={"assignment_id": assignment.id, "answers": {}},
            headers=auth_headers(user),
        )

    def test_student_sees_own(self, client, student, assignment):
        self._submit(client, student, assignment)
        resp = client.get(f"/submissions/user/{student.id}", headers=auth_headers(student))
        assert resp.status_code == 200
        assert len(resp.json()) == 1

    def test_student_cannot_see_others(self, client, student, other_student, assignment):
        resp = client.get(f"/submissions/user/{other_student.id}", headers=auth_headers(student))
        assert resp.status_code == 403

    def test_teacher_lists_by_assignment(self, client, teacher, student, other_student, assignment):
        self._submit(client, student, assignment)
        self._submit(client, other_student, assignment)
        resp = client.get(f"/submissions/assignment/{assignment.id}", headers=auth_headers(teacher))
        assert resp.status_code == 200
        assert {s["user_id"] for s in resp.json()} == {student.id, other_student.id}

    def test_student_cannot_list_by_assignment(self, client, student, assignment):
        resp = client.get(f"/submissions/assignment/{assignment.id}", headers=auth_headers(student))
        assert resp.status_code == 403
