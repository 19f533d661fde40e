from fastapi import APIRouter, Depends, status

from school_records.auth.dependencies import get_current_principal
from school_records.auth.policy import Action, Resource, enforce
from school_records.core.exceptions import ValidationFailed
from school_records.models.routine import RoutineRequest, routines
from school_records.models.user import Principal, Role, users
from school_records.store import CollectionStore, get_store

router = APIRouter(tags=['routines'])


def ensure_teacher_exists(store: CollectionStore, teacher_id: int) -> None:
    teacher = users(store).find_first(
        lambda record: record.get('id') == teacher_id and record.get('userType') == Role.TEACHER.value
    )
    if teacher is None:
        raise ValidationFailed('Invalid teacherId')


@router.post('', status_code=status.HTTP_201_CREATED)
def create_routine(
    data: RoutineRequest,
    principal: Principal = Depends(get_current_principal),
    store: CollectionStore = Depends(get_store),
):
    enforce(principal, Action.CREATE, Resource.ROUTINES)
    ensure_teacher_exists(store, data.teacher_id)
    return routines(store).create(data.to_record())


@router.put('/{routine_id}')
def update_routine(
    routine_id: int,
    data: RoutineRequest,
    principal: Principal = Depends(get_current_principal),
    store: CollectionStore = Depends(get_store),
):
    enforce(principal, Action.UPDATE, Resource.ROUTINES)
    ensure_teacher_exists(store, data.teacher_id)
    return routines(store).update(routine_id, data.to_record())


@router.delete('/{routine_id}')
def delete_routine(
    routine_id: int,
    principal: Principal = Depends(get_current_principal),
    store: CollectionStore = Depends(get_store),
):
    enforce(principal, Action.DELETE, Resource.ROUTINES)
    routines(store).delete(routine_id)
    return {'message': 'Routine deleted'}


@router.get('')
def list_routines(
    principal: Principal = Depends(get_current_principal),
    store: CollectionStore = Depends(get_store),
):
    decision = enforce(principal, Action.READ, Resource.ROUTINES)
    return routines(store).find_where(decision.permits)
