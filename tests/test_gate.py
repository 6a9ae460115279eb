"""
tests.test_gate

Authorization gate behavior: decisions, navigation, supersession and teardown.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from admin_console.auth.gate import TRANSITIONS, AuthorizationGate, RecordingNavigator
from admin_console.auth.models import AdminRole, AuthorizationDecision, Identity
from admin_console.errors import InvalidTransition
from tests.fakes import FakeDirectory, FakeSessions

D = AuthorizationDecision

ALICE = Identity(id="alice")
BOB = Identity(id="bob")


def _gate(
    sessions: FakeSessions, directory: FakeDirectory
) -> tuple[AuthorizationGate, RecordingNavigator]:
    navigator = RecordingNavigator()
    gate = AuthorizationGate(sessions=sessions, directory=directory, navigator=navigator)
    return gate, navigator


def test_transition_table_only_leaves_resolving() -> None:
    assert all(src is D.resolving for src, _ in TRANSITIONS)
    assert {dst for _, dst in TRANSITIONS} == {D.unauthenticated, D.unauthorized, D.authorized}


@pytest.mark.asyncio
async def test_starts_resolving() -> None:
    gate, navigator = _gate(FakeSessions(identity=ALICE), FakeDirectory())
    assert gate.state is D.resolving
    assert navigator.history == []


@pytest.mark.asyncio
async def test_no_identity_is_unauthenticated_and_redirects_to_sign_in() -> None:
    gate, navigator = _gate(FakeSessions(), FakeDirectory())
    assert await gate.evaluate(None, require_admin=True) is D.unauthenticated
    assert gate.state is D.unauthenticated
    assert navigator.history == ["/auth/login"]


@pytest.mark.asyncio
async def test_expired_session_is_unauthenticated() -> None:
    sessions = FakeSessions(identity=ALICE, ttl=timedelta(seconds=-5))
    directory = FakeDirectory({"alice": AdminRole.super_admin})
    gate, navigator = _gate(sessions, directory)

    assert await gate.evaluate(ALICE, require_admin=True) is D.unauthenticated
    assert navigator.last == "/auth/login"
    assert directory.calls == []


@pytest.mark.asyncio
async def test_session_validation_error_is_unauthenticated() -> None:
    sessions = FakeSessions(identity=ALICE)
    sessions.invalid = True
    gate, _ = _gate(sessions, FakeDirectory())
    assert await gate.evaluate(ALICE) is D.unauthenticated


@pytest.mark.asyncio
async def test_non_admin_identity_is_unauthorized() -> None:
    gate, navigator = _gate(FakeSessions(identity=ALICE), FakeDirectory())
    assert await gate.evaluate(ALICE, require_admin=True) is D.unauthorized
    assert gate.admin_record is None
    assert navigator.history == ["/unauthorized"]


@pytest.mark.asyncio
async def test_role_outside_allow_list_is_unauthorized_but_record_is_kept() -> None:
    directory = FakeDirectory({"alice": AdminRole.moderator})
    gate, navigator = _gate(FakeSessions(identity=ALICE), directory)

    decision = await gate.evaluate(ALICE, True, [AdminRole.super_admin])
    assert decision is D.unauthorized
    assert gate.admin_record is not None and gate.admin_record.role is AdminRole.moderator
    assert navigator.last == "/unauthorized"


@pytest.mark.asyncio
async def test_allowed_admin_is_authorized_without_navigation() -> None:
    directory = FakeDirectory({"alice": AdminRole.content_admin})
    gate, navigator = _gate(FakeSessions(identity=ALICE), directory)

    decision = await gate.evaluate(ALICE, True, [AdminRole.super_admin, AdminRole.content_admin])
    assert decision is D.authorized
    assert gate.admin_record is not None
    assert navigator.history == []


@pytest.mark.asyncio
async def test_session_only_view_skips_directory() -> None:
    directory = FakeDirectory()
    gate, _ = _gate(FakeSessions(identity=ALICE), directory)

    assert await gate.evaluate(ALICE, require_admin=False) is D.authorized
    assert directory.calls == []


@pytest.mark.asyncio
async def test_directory_error_fails_closed() -> None:
    directory = FakeDirectory({"alice": AdminRole.super_admin})
    directory.error = RuntimeError("directory unavailable")
    gate, navigator = _gate(FakeSessions(identity=ALICE), directory)

    assert await gate.evaluate(ALICE, require_admin=True) is D.unauthorized
    assert navigator.last == "/unauthorized"


@pytest.mark.asyncio
async def test_never_authorized_without_valid_session_whatever_the_directory_says() -> None:
    directory = FakeDirectory({"alice": AdminRole.super_admin})
    for sessions in (
        FakeSessions(),
        FakeSessions(identity=ALICE, ttl=timedelta(seconds=-1)),
    ):
        gate, _ = _gate(sessions, directory)
        assert await gate.evaluate(ALICE, require_admin=True) is not D.authorized


@pytest.mark.asyncio
async def test_superseded_resolution_is_discarded() -> None:
    directory = FakeDirectory({"alice": AdminRole.super_admin})
    release = directory.hold("alice")
    gate, navigator = _gate(FakeSessions(identity=ALICE), directory)

    slow = asyncio.create_task(gate.evaluate(ALICE, require_admin=True))
    await directory.started["alice"].wait()

    # A newer activation (different identity, no admin record) resolves first.
    assert await gate.evaluate(BOB, require_admin=True) is D.unauthorized
    release.set()

    # The stale cycle reports what it resolved to, but does not apply it.
    assert await slow is D.authorized
    assert gate.state is D.unauthorized
    assert gate.admin_record is None
    assert navigator.history == ["/unauthorized"]


@pytest.mark.asyncio
async def test_close_discards_in_flight_resolution() -> None:
    directory = FakeDirectory()
    release = directory.hold("alice")
    gate, navigator = _gate(FakeSessions(identity=ALICE), directory)
    seen: list[AuthorizationDecision] = []
    gate.subscribe(seen.append)

    pending = asyncio.create_task(gate.evaluate(ALICE, require_admin=True))
    await directory.started["alice"].wait()
    gate.close()
    release.set()

    assert await pending is D.unauthorized
    assert gate.closed
    assert gate.state is D.resolving
    assert navigator.history == []
    assert seen == []


@pytest.mark.asyncio
async def test_closed_gate_rejects_new_evaluations() -> None:
    gate, _ = _gate(FakeSessions(identity=ALICE), FakeDirectory())
    gate.close()
    with pytest.raises(InvalidTransition):
        await gate.evaluate(ALICE)


@pytest.mark.asyncio
async def test_update_reevaluates_only_on_input_change() -> None:
    directory = FakeDirectory({"alice": AdminRole.super_admin})
    gate, _ = _gate(FakeSessions(identity=ALICE), directory)

    assert await gate.update(ALICE, True) is D.authorized
    assert await gate.update(ALICE, True) is D.authorized
    assert directory.calls == ["alice"]

    assert await gate.update(ALICE, True, [AdminRole.moderator]) is D.unauthorized
    assert directory.calls == ["alice", "alice"]


@pytest.mark.asyncio
async def test_subscribers_see_resolving_then_decision() -> None:
    directory = FakeDirectory({"alice": AdminRole.super_admin})
    gate, _ = _gate(FakeSessions(identity=ALICE), directory)
    seen: list[AuthorizationDecision] = []
    unsubscribe = gate.subscribe(seen.append)

    await gate.evaluate(ALICE, True)
    await gate.evaluate(ALICE, True, [AdminRole.moderator])
    unsubscribe()
    await gate.evaluate(ALICE, True)

    assert seen == [D.authorized, D.resolving, D.unauthorized]


@pytest.mark.asyncio
async def test_custom_navigation_paths() -> None:
    navigator = RecordingNavigator()
    gate = AuthorizationGate(
        sessions=FakeSessions(),
        directory=FakeDirectory(),
        navigator=navigator,
        sign_in_path="/login",
        access_denied_path="/denied",
    )
    await gate.evaluate(None, True)
    assert navigator.history == ["/login"]


@pytest.mark.asyncio
async def test_moderator_with_empty_allow_list_is_authorized() -> None:
    directory = FakeDirectory({"alice": AdminRole.moderator})
    gate, navigator = _gate(FakeSessions(identity=ALICE), directory)

    assert await gate.evaluate(ALICE, True, []) is D.authorized
    assert navigator.history == []


@pytest.mark.asyncio
async def test_session_provider_failure_is_unauthenticated() -> None:
    class _DownSessions(FakeSessions):
        async def get_session(self):
            raise RuntimeError("provider down")

    directory = FakeDirectory({"alice": AdminRole.super_admin})
    gate, navigator = _gate(_DownSessions(identity=ALICE), directory)

    assert await gate.evaluate(ALICE, require_admin=True) is D.unauthenticated
    assert gate.state is D.unauthenticated
    assert navigator.history == ["/auth/login"]
    assert directory.calls == []
