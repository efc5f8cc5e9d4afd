# tests/test_authorization_policy.py
from uuid import uuid4

import pytest

from schoolhub.core.caller import (
    AdminCaller, Caller, ParentCaller, ProfileCaller, StudentCaller, TeacherCaller, UnknownRoleCaller
)
from schoolhub.core.exceptions import AuthorizationError
from schoolhub.services.authorization_service import RESOURCE_TYPES, AuthorizationPolicy

pytestmark = pytest.mark.anyio


class FakeLookup:
    """In-memory ownership facts; records every predicate asked"""

    def __init__(self, **facts):
        self.facts = facts
        self.calls = []

    def __getattr__(self, name):
        async def predicate(*args):
            self.calls.append((name, args))
            return self.facts.get(name, False)
        return predicate


def identity():
    return dict(user_id=uuid4(), email="someone@school.test", full_name="Someone")


def admin():
    return AdminCaller(**identity())


def teacher(profile=True):
    return TeacherCaller(**identity(), profile_id=uuid4() if profile else None)


def student(profile=True, class_id=None):
    return StudentCaller(**identity(), profile_id=uuid4() if profile else None, class_id=class_id)


def parent(profile=True):
    return ParentCaller(**identity(), profile_id=uuid4() if profile else None)


async def test_authorize_checks_role_membership():
    policy = AuthorizationPolicy(FakeLookup())

    assert policy.authorize(teacher(), ["TEACHER", "ADMIN"])
    decision = policy.authorize(student(), ["TEACHER", "ADMIN"])
    assert not decision
    assert decision.reason == "insufficient role"


@pytest.mark.parametrize("resource_type", RESOURCE_TYPES)
async def test_admin_always_owns(resource_type):
    lookup = FakeLookup()
    policy = AuthorizationPolicy(lookup)

    assert await policy.check_ownership(admin(), resource_type, uuid4())
    assert await policy.check_class_ownership(admin(), uuid4())
    assert await policy.check_class_membership(admin(), uuid4())
    assert lookup.calls == []


async def test_invalid_resource_type_denies_even_admin():
    decision = await AuthorizationPolicy(FakeLookup()).check_ownership(admin(), "invoice", uuid4())

    assert not decision
    assert decision.reason == "invalid resource type"


async def test_student_owns_only_own_profile():
    caller = student()
    policy = AuthorizationPolicy(FakeLookup())

    assert await policy.check_ownership(caller, "student", caller.student_id)
    denied = await policy.check_ownership(caller, "student", uuid4())
    assert not denied
    assert denied.reason == "Access denied. You do not own this resource."


async def test_parent_owns_child_through_lookup():
    lookup = FakeLookup(student_has_parent=True)
    caller = parent()
    child_id = uuid4()

    assert await AuthorizationPolicy(lookup).check_ownership(caller, "student", child_id)
    assert lookup.calls == [("student_has_parent", (child_id, caller.parent_id))]


@pytest.mark.parametrize("resource_type", RESOURCE_TYPES)
async def test_missing_rows_deny_every_role(resource_type):
    policy = AuthorizationPolicy(FakeLookup())

    for caller in (teacher(), student(), parent()):
        assert not await policy.check_ownership(caller, resource_type, uuid4())


@pytest.mark.parametrize("resource_type", RESOURCE_TYPES)
async def test_missing_profile_denies_without_lookup(resource_type):
    lookup = FakeLookup(
        student_has_parent=True,
        attendance_belongs_to_student=True,
        attendance_in_teacher_class=True,
        grade_belongs_to_student=True,
        grade_in_teacher_exam=True,
    )
    policy = AuthorizationPolicy(lookup)

    for caller in (teacher(profile=False), student(profile=False), parent(profile=False)):
        assert not await policy.check_ownership(caller, resource_type, uuid4())
    assert lookup.calls == []


async def test_teacher_owns_attendance_in_own_class():
    lookup = FakeLookup(attendance_in_teacher_class=True)
    caller = teacher()

    assert await AuthorizationPolicy(lookup).check_ownership(caller, "attendance", uuid4())
    assert lookup.calls[0][0] == "attendance_in_teacher_class"


async def test_teacher_owns_grade_of_own_exam():
    lookup = FakeLookup(grade_in_teacher_exam=True)

    assert await AuthorizationPolicy(lookup).check_ownership(teacher(), "grade", uuid4())


async def test_parent_cannot_own_grade_or_attendance():
    lookup = FakeLookup(grade_belongs_to_student=True, attendance_belongs_to_student=True)
    policy = AuthorizationPolicy(lookup)

    assert not await policy.check_ownership(parent(), "grade", uuid4())
    assert not await policy.check_ownership(parent(), "attendance", uuid4())


async def test_class_ownership_rules():
    class_id = uuid4()
    policy = AuthorizationPolicy(FakeLookup(class_taught_by=True))

    assert await policy.check_class_ownership(teacher(), class_id)

    denied = await policy.check_class_ownership(student(), class_id)
    assert denied.reason == "Access denied. Only teachers and admins can access class resources."

    denied = await AuthorizationPolicy(FakeLookup()).check_class_ownership(teacher(), class_id)
    assert denied.reason == "Access denied. You are not the teacher of this class."


async def test_class_membership_rules():
    class_id = uuid4()

    assert await AuthorizationPolicy(FakeLookup()).check_class_membership(teacher(), class_id)
    assert await AuthorizationPolicy(FakeLookup(student_in_class=True)).check_class_membership(student(), class_id)
    assert await AuthorizationPolicy(FakeLookup(parent_has_child_in_class=True)).check_class_membership(
        parent(), class_id
    )

    denied = await AuthorizationPolicy(FakeLookup()).check_class_membership(parent(), class_id)
    assert not denied
    assert denied.reason == "Access denied. You are not a member of this class."


async def test_unknown_role_is_denied_everywhere():
    caller = UnknownRoleCaller(**identity(), raw_role="JANITOR")
    policy = AuthorizationPolicy(FakeLookup())

    assert not policy.authorize(caller, ["ADMIN", "TEACHER", "STUDENT", "PARENT"])
    assert not await policy.check_ownership(caller, "student", uuid4())
    assert not await policy.check_class_ownership(caller, uuid4())
    assert not await policy.check_class_membership(caller, uuid4())


def test_require_profile_names_the_role():
    with pytest.raises(AuthorizationError) as exc:
        teacher(profile=False).require_profile()

    assert exc.value.status_code == 403
    assert exc.value.message == "Access denied. Teacher profile not found."


@pytest.mark.parametrize("base", [Caller, ProfileCaller])
def test_caller_bases_need_a_role_variant(base):
    with pytest.raises(TypeError):
        base(user_id=uuid4(), email="x@school.test", full_name="X")


def test_every_variant_reports_its_role():
    ids = dict(user_id=uuid4(), email="x@school.test", full_name="X")

    assert [c.role for c in (
        AdminCaller(**ids), TeacherCaller(**ids), StudentCaller(**ids), ParentCaller(**ids),
        UnknownRoleCaller(**ids, raw_role="JANITOR"),
    )] == ["ADMIN", "TEACHER", "STUDENT", "PARENT", "JANITOR"]
