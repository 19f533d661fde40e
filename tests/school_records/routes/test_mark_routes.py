import pytest

from school_records.core.exceptions import AuthorizationDenied
from school_records.models.mark import MarkRequest
from school_records.routes.mark_routes import list_marks, submit_marks
from school_records.store import CollectionStore


@pytest.fixture
def people(register) -> dict:
    return {
        'admin': register('admin@example.com', 'Admin'),
        'teacher': register('teacher@example.com', 'Teacher'),
        'student': register('student@example.com', 'Student', 'A'),
        'other': register('other@example.com', 'Student', 'B'),
    }


def test_teacher_submits_marks_with_derived_grade(store: CollectionStore, people: dict) -> None:
    student = people['student']

    entry = submit_marks(MarkRequest(user_id=student.id, subject='Math', marks=84), principal=people['teacher'], store=store)

    assert entry['userId'] == student.id
    assert entry['subject'] == 'Math'
    assert entry['marks'] == 84
    assert entry['grade'] == 'B'
    assert entry['updatedBy'] == people['teacher'].id
    assert entry['updatedAt'].endswith('Z')


def test_second_submission_for_same_subject_overwrites(store: CollectionStore, people: dict) -> None:
    student = people['student']
    submit_marks(MarkRequest(user_id=student.id, subject='Math', marks=55), principal=people['teacher'], store=store)
    submit_marks(MarkRequest(user_id=student.id, subject='English', marks=71), principal=people['teacher'], store=store)

    latest = submit_marks(MarkRequest(user_id=student.id, subject='Math', marks=95), principal=people['admin'], store=store)

    math = [entry for entry in store.load('marks') if entry['subject'] == 'Math']

    assert len(store.load('marks')) == 2
    assert math == [latest]
    assert latest['grade'] == 'A'
    assert latest['updatedBy'] == people['admin'].id


def test_student_cannot_submit_marks(store: CollectionStore, people: dict) -> None:
    student = people['student']

    with pytest.raises(AuthorizationDenied) as exception_info:
        submit_marks(MarkRequest(user_id=student.id, subject='Math', marks=100), principal=student, store=store)

    assert exception_info.value.message == 'Only Admins or Teachers can update marks'
    assert store.load('marks') == []


def test_marks_reads_follow_ownership(store: CollectionStore, people: dict) -> None:
    student = people['student']
    submit_marks(MarkRequest(user_id=student.id, subject='Math', marks=62), principal=people['teacher'], store=store)
    submit_marks(MarkRequest(user_id=people['other'].id, subject='Math', marks=40), principal=people['teacher'], store=store)

    own = list_marks(student.id, principal=student, store=store)

    assert [(entry['subject'], entry['grade']) for entry in own] == [('Math', 'D')]
    assert list_marks(student.id, principal=people['admin'], store=store) == own
    assert list_marks(student.id, principal=people['teacher'], store=store) == own

    with pytest.raises(AuthorizationDenied) as exception_info:
        list_marks(student.id, principal=people['other'], store=store)

    assert exception_info.value.message == 'Unauthorized to view these marks'


def test_marks_listing_for_unknown_user_is_empty(store: CollectionStore, people: dict) -> None:
    assert list_marks(99, principal=people['admin'], store=store) == []
