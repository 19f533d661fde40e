from fastapi import APIRouter, Depends, status

from school_records.auth.dependencies import get_current_principal
from school_records.auth.policy import Action, Resource, enforce
from school_records.core.clock import isoformat, utcnow
from school_records.models.mark import MarkRequest, calculate_grade, marks
from school_records.models.user import Principal
from school_records.store import CollectionStore, get_store

router = APIRouter(tags=['marks'])


@router.post('', status_code=status.HTTP_201_CREATED)
def submit_marks(
    data: MarkRequest,
    principal: Principal = Depends(get_current_principal),
    store: CollectionStore = Depends(get_store),
):
    enforce(principal, Action.CREATE, Resource.MARKS, {'userId': data.user_id})

    # A second submission for the same student and subject overwrites the first.
    return marks(store).upsert_by_key(
        {'userId': data.user_id, 'subject': data.subject},
        {
            'marks': data.marks,
            'grade': calculate_grade(data.marks),
            'updatedBy': principal.id,
            'updatedAt': isoformat(utcnow()),
        },
    )


@router.get('/{user_id}')
def list_marks(
    user_id: int,
    principal: Principal = Depends(get_current_principal),
    store: CollectionStore = Depends(get_store),
):
    enforce(principal, Action.READ, Resource.MARKS, {'userId': user_id})
    return marks(store).find_where(lambda record: record.get('userId') == user_id)
