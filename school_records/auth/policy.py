"""Role and ownership rules for every resource, in one table.

``authorize`` is a pure decision function; ``enforce`` turns a denial into the
matching service error. Handlers call ``enforce`` before touching a repository
so a rejected request never mutates a collection.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from school_records.core.exceptions import (
    AuthenticationFailed,
    AuthorizationDenied,
    ServiceError,
    ValidationFailed,
)
from school_records.models import policy as policy_model
from school_records.models.user import Principal, Role
from school_records.repository import matches


class Action(str, Enum):
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'
    READ = 'read'


class Resource(str, Enum):
    ACCOUNTS = 'accounts'
    ATTENDANCE = 'attendance'
    ROUTINES = 'routines'
    DOCUMENTS = 'documents'
    POLICIES = 'policies'
    MARKS = 'marks'


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None
    scope: Mapping[str, Any] = field(default_factory=dict)
    error: type[ServiceError] | None = None

    def permits(self, record: Mapping[str, Any]) -> bool:
        return self.allowed and matches(record, self.scope)


@dataclass(frozen=True)
class Rule:
    """Who may perform one action on one resource.

    ``roles=None`` means the action is public and needs no identity.
    ``owner_field`` lets any other authenticated caller through when the
    target's field equals the caller's id. ``scopes`` narrows reads per role
    to records whose field equals an attribute of the caller.
    ``payload_check`` returns a validation message for unacceptable targets.
    """

    roles: frozenset[Role] | None
    message: str = 'Access denied'
    owner_field: str | None = None
    scopes: Mapping[Role, tuple[str, str]] = field(default_factory=dict)
    payload_check: Callable[[Mapping[str, Any]], str | None] | None = None


def _policy_file_type(target: Mapping[str, Any]) -> str | None:
    if not policy_model.is_allowed_file(target.get('fileName')):
        return 'Only PDF and DOCX files are allowed'
    return None


STAFF = frozenset({Role.ADMIN, Role.TEACHER})
ADMINS = frozenset({Role.ADMIN})

RULES: dict[tuple[Resource, Action], Rule] = {
    (Resource.ACCOUNTS, Action.CREATE): Rule(roles=None),
    (Resource.ACCOUNTS, Action.READ): Rule(roles=frozenset(), message='Accounts cannot be listed'),
    (Resource.ATTENDANCE, Action.CREATE): Rule(STAFF, 'Only Admins or Teachers can modify attendance'),
    (Resource.ATTENDANCE, Action.UPDATE): Rule(STAFF, 'Only Admins or Teachers can modify attendance'),
    (Resource.ATTENDANCE, Action.READ): Rule(STAFF, 'Access denied', owner_field='userId'),
    (Resource.ROUTINES, Action.CREATE): Rule(ADMINS, 'Only Admins can create routines'),
    (Resource.ROUTINES, Action.UPDATE): Rule(ADMINS, 'Only Admins can update routines'),
    (Resource.ROUTINES, Action.DELETE): Rule(ADMINS, 'Only Admins can delete routines'),
    (Resource.ROUTINES, Action.READ): Rule(
        frozenset(Role),
        'Invalid user type',
        scopes={Role.TEACHER: ('teacherId', 'id'), Role.STUDENT: ('section', 'section')},
    ),
    (Resource.DOCUMENTS, Action.CREATE): Rule(frozenset({Role.TEACHER}), 'Only Teachers can upload documents'),
    (Resource.DOCUMENTS, Action.READ): Rule(roles=None),
    (Resource.POLICIES, Action.CREATE): Rule(
        ADMINS,
        'Only Admins can upload policies',
        payload_check=_policy_file_type,
    ),
    (Resource.POLICIES, Action.READ): Rule(roles=None),
    (Resource.MARKS, Action.CREATE): Rule(STAFF, 'Only Admins or Teachers can update marks'),
    (Resource.MARKS, Action.UPDATE): Rule(STAFF, 'Only Admins or Teachers can update marks'),
    (Resource.MARKS, Action.READ): Rule(STAFF, 'Unauthorized to view these marks', owner_field='userId'),
}


def authorize(
    principal: Principal | None,
    action: Action,
    resource: Resource,
    target: Mapping[str, Any] | None = None,
) -> Decision:
    rule = RULES.get((resource, action))
    if rule is None:
        return Decision(False, f'Cannot {action.value} {resource.value}', error=AuthorizationDenied)

    if rule.roles is None:
        return Decision(True)

    if principal is None:
        return Decision(False, 'No token provided', error=AuthenticationFailed)

    if principal.role in rule.roles:
        if rule.payload_check is not None:
            problem = rule.payload_check(target or {})
            if problem:
                return Decision(False, problem, error=ValidationFailed)
        return _scoped(principal, rule)

    if rule.owner_field and target is not None and target.get(rule.owner_field) == principal.id:
        return Decision(True)

    return Decision(False, rule.message, error=AuthorizationDenied)


def _scoped(principal: Principal, rule: Rule) -> Decision:
    if principal.role not in rule.scopes:
        return Decision(True)

    record_field, attribute = rule.scopes[principal.role]
    value = getattr(principal, attribute)
    if value is None:
        return Decision(False, f'{principal.role.value} {attribute} not found', error=ValidationFailed)
    return Decision(True, scope={record_field: value})


def enforce(
    principal: Principal | None,
    action: Action,
    resource: Resource,
    target: Mapping[str, Any] | None = None,
) -> Decision:
    decision = authorize(principal, action, resource, target)
    if not decision.allowed:
        raise (decision.error or AuthorizationDenied)(decision.reason or 'Access denied')
    return decision
