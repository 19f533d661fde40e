"""Marks model definitions and grading rules."""

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictInt, model_validator
from pydantic.alias_generators import to_camel

from school_records.repository import Repository
from school_records.store import CollectionStore

COLLECTION = 'marks'

VALID_SUBJECTS = ('Math', 'Science', 'English')
MIN_MARKS = 0
MAX_MARKS = 100

# Lower bounds are inclusive.
GRADE_THRESHOLDS = (
    (90, 'A'),
    (80, 'B'),
    (70, 'C'),
    (60, 'D'),
)
FAILING_GRADE = 'F'


def calculate_grade(marks: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if marks >= threshold:
            return grade
    return FAILING_GRADE


class MarkRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: StrictInt | None = None
    subject: str | None = None
    marks: Any = None

    @model_validator(mode='after')
    def validate_marks(self) -> 'MarkRequest':
        if not self.user_id or not self.subject or self.marks is None:
            raise ValueError('userId, subject, and marks are required')
        if (
            isinstance(self.marks, bool)
            or not isinstance(self.marks, (int, float))
            or not MIN_MARKS <= self.marks <= MAX_MARKS
        ):
            raise ValueError(f'Marks must be a number between {MIN_MARKS} and {MAX_MARKS}')
        if self.subject not in VALID_SUBJECTS:
            raise ValueError(f'Subject must be one of: {", ".join(VALID_SUBJECTS)}')
        return self


def marks(store: CollectionStore) -> Repository:
    return Repository(store, COLLECTION, label='Marks')
