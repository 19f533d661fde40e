from fastapi import APIRouter, Depends, status

from school_records.auth.dependencies import get_current_principal
from school_records.auth.policy import Action, Resource, enforce
from school_records.models.document import FileRecordRequest
from school_records.models.policy import policies
from school_records.models.user import Principal
from school_records.store import CollectionStore, get_store

router = APIRouter(tags=['policies'])


@router.post('', status_code=status.HTTP_201_CREATED)
def create_policy(
    data: FileRecordRequest,
    principal: Principal = Depends(get_current_principal),
    store: CollectionStore = Depends(get_store),
):
    enforce(principal, Action.CREATE, Resource.POLICIES, {'fileName': data.file_name})
    return policies(store).create(data.to_record(uploaded_by=principal.id))


@router.get('')
def list_policies(store: CollectionStore = Depends(get_store)):
    enforce(None, Action.READ, Resource.POLICIES)
    return policies(store).find_all()


@router.get('/{policy_id}')
def get_policy(policy_id: int, store: CollectionStore = Depends(get_store)):
    enforce(None, Action.READ, Resource.POLICIES)
    return policies(store).find_by_id(policy_id)
