from fastapi import APIRouter, Depends, status

from school_records.auth.dependencies import get_current_principal
from school_records.auth.policy import Action, Resource, enforce
from school_records.core.exceptions import NotFound, ValidationFailed
from school_records.models.attendance import AttendanceRequest, attendance
from school_records.models.user import Principal, Role, users
from school_records.store import CollectionStore, get_store

router = APIRouter(tags=['attendance'])

TRACKED_ROLES = (Role.TEACHER.value, Role.STUDENT.value)


@router.post('', status_code=status.HTTP_201_CREATED)
def record_attendance(
    data: AttendanceRequest,
    principal: Principal = Depends(get_current_principal),
    store: CollectionStore = Depends(get_store),
):
    enforce(principal, Action.CREATE, Resource.ATTENDANCE, {'userId': data.user_id})

    target = users(store).find_first(lambda record: record.get('id') == data.user_id)
    if target is None or target.get('userType') not in TRACKED_ROLES:
        raise ValidationFailed('Invalid userId or user is not a Teacher/Student')

    # The whole day mapping is replaced; days missing from the request are dropped.
    return attendance(store).upsert_by_key(
        {'userId': data.user_id},
        {'attendance': data.attendance},
        defaults={'name': target['email'], 'userType': target['userType']},
    )


@router.get('/{user_id}')
def get_attendance(
    user_id: int,
    principal: Principal = Depends(get_current_principal),
    store: CollectionStore = Depends(get_store),
):
    enforce(principal, Action.READ, Resource.ATTENDANCE, {'userId': user_id})

    record = attendance(store).find_first(lambda item: item.get('userId') == user_id)
    if record is None:
        raise NotFound('Attendance not found')
    return record
