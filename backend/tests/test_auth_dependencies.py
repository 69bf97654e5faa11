import pathlib
import sys
from datetime import timedelta
from uuid import uuid4

import pytest
from fastapi import HTTPException


ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import backend.main as backend_main
from backend.app.sponsors import AdminFlag


def test_get_optional_current_actor_missing_cookie_returns_none():
    assert backend_main.get_optional_current_actor(None) is None


def test_get_optional_current_actor_invalid_token_returns_none():
    assert backend_main.get_optional_current_actor("not-a-valid-token") is None


def test_get_optional_current_actor_expired_token_returns_none():
    expired_token = backend_main.create_access_token(
        subject=str(uuid4()), expires_delta=timedelta(minutes=-5)
    )

    assert backend_main.get_optional_current_actor(expired_token) is None


def test_token_with_non_uuid_subject_is_rejected():
    token = backend_main.create_access_token(subject="42", flags=[AdminFlag.ADMIN])

    assert backend_main.resolve_actor_from_session_token(token) is None


def test_valid_token_yields_interactive_actor_with_flags():
    session_id = uuid4()
    token = backend_main.create_access_token(
        subject=str(session_id),
        flags=[AdminFlag.ADMIN, "sponsor", "superuser"],
    )

    actor = backend_main.get_current_actor(token)

    assert actor.session_id == session_id
    assert actor.is_interactive
    assert actor.flags == frozenset({AdminFlag.ADMIN, AdminFlag.SPONSOR})


def test_get_current_actor_requires_cookie():
    with pytest.raises(HTTPException) as excinfo:
        backend_main.get_current_actor(None)

    assert excinfo.value.status_code == 401


def test_get_current_actor_rejects_tampered_token():
    token = backend_main.create_access_token(subject=str(uuid4()))

    with pytest.raises(HTTPException) as excinfo:
        backend_main.get_current_actor(token + "x")

    assert excinfo.value.status_code == 401
