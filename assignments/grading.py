from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from courses.models import is_enrolled
from .models import Assignment, AssignmentType, QuizQuestion, Submission, SubmissionStatus

logger = logging.getLogger(__name__)

DUPLICATE_SUBMISSION = "A submission already exists for this assignment"


def _normalise(answer: Any) -> str:
    return str(answer if answer is not None else "").strip().casefold()


def grade_quiz(assignment: Assignment, answers: dict) -> dict[str, Any]:
    """Grade quiz answers against each question's correct answer.

    - answers: mapping of question id (int or str) -> the student's answer

    Returns: { 'earned': int, 'possible': int, 'score': float, 'per_question': {qid: bool} }
    where `score` is a percentage and `earned` is in question points.
    """
    if assignment.assignment_type != AssignmentType.QUIZ:
        raise ValidationError("Only quiz assignments can be graded automatically")
    given = {str(k): v for k, v in (answers or {}).items()}
    earned = 0
    possible = 0
    perq: dict[int, bool] = {}
    for q in assignment.questions.all():
        possible += q.points
        ok = str(q.id) in given and _normalise(given[str(q.id)]) == _normalise(q.correct_answer)
        perq[q.id] = ok
        if ok:
            earned += q.points
    score = round((earned / possible) * 100.0, 2) if possible else 0.0
    return {"earned": earned, "possible": possible, "score": score, "per_question": perq}


def add_question(assignment: Assignment, **fields) -> QuizQuestion:
    if assignment.assignment_type != AssignmentType.QUIZ:
        raise ValidationError("Quiz questions can only be added to quiz assignments")
    return QuizQuestion.objects.create(assignment=assignment, **fields)


def submit(
    assignment: Assignment,
    student,
    *,
    text: str = "",
    attachment_url: str = "",
    answers: dict | None = None,
) -> Submission:
    """Record a student's single submission for an assignment.

    Submissions after the due date are marked late. Quiz answers are graded
    on the spot and scaled to the assignment's total points.
    """
    if not is_enrolled(student, assignment.course):
        raise PermissionDenied("You must be enrolled in the course to submit")
    if Submission.objects.filter(assignment=assignment, student=student).exists():
        raise ValidationError(DUPLICATE_SUBMISSION)

    now = timezone.now()
    status = SubmissionStatus.LATE if now > assignment.due_date else SubmissionStatus.SUBMITTED
    submission = Submission(
        assignment=assignment,
        student=student,
        submission_text=text,
        attachment_url=attachment_url,
        answers=answers or {},
        submitted_at=now,
        status=status,
    )
    if assignment.assignment_type == AssignmentType.QUIZ and answers:
        result = grade_quiz(assignment, answers)
        submission.grade = round(result["score"] / 100.0 * assignment.total_points, 2)
        submission.graded_at = now
        submission.status = SubmissionStatus.GRADED
        submission.feedback = f"{result['earned']}/{result['possible']} points"
    try:
        with transaction.atomic():
            submission.save()
    except IntegrityError:
        raise ValidationError(DUPLICATE_SUBMISSION)
    logger.info("Submission %s by user %s on assignment %s (%s)", submission.pk, student.pk, assignment.pk, submission.status)
    return submission


def grade_submission(submission: Submission, *, grade: float, feedback: str, graded_by) -> Submission:
    total = submission.assignment.total_points
    if grade < 0 or grade > total:
        raise ValidationError(f"Grade must be between 0 and {total}")
    submission.grade = grade
    submission.feedback = feedback
    submission.graded_by = graded_by
    submission.graded_at = timezone.now()
    submission.status = SubmissionStatus.GRADED
    submission.save(update_fields=["grade", "feedback", "graded_by", "graded_at", "status"])
    logger.info("Submission %s graded %s/%s by user %s", submission.pk, grade, total, graded_by.pk)
    return submission
