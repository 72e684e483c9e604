import asyncio
import re

import pytest

from finance_tracker.errors import AuthError, ValidationError
from finance_tracker.services.auth_service import make_guest_credentials

from factories import TOKEN


def test_login_stores_token(server, auth):
    server.users["alice"] = "pw"

    token = asyncio.run(auth.login("alice", "pw"))

    assert token == TOKEN
    assert auth._gate.token == TOKEN


def test_login_failure_uses_server_message(server, auth):
    with pytest.raises(AuthError) as exc:
        asyncio.run(auth.login("alice", "wrong"))

    assert exc.value.message == "Invalid credentials"
    assert not auth._gate.is_authenticated


def test_login_network_error(server, auth):
    server.network_down = True

    with pytest.raises(AuthError) as exc:
        asyncio.run(auth.login("alice", "pw"))
    assert exc.value.message == "Network error"


def test_signup_password_mismatch_is_local(server, auth):
    with pytest.raises(ValidationError) as exc:
        asyncio.run(auth.signup("bob", "one", "two"))

    assert exc.value.message == "Passwords do not match"
    assert server.requests == []


def test_signup_duplicate_user(server, auth):
    server.users["bob"] = "x"

    with pytest.raises(AuthError) as exc:
        asyncio.run(auth.signup("bob", "pw", "pw"))
    assert exc.value.message == "User already exists"


def test_register_logs_in_after_signup(server, auth):
    asyncio.run(auth.register("carol", "pw", "pw"))

    assert server.users == {"carol": "pw"}
    assert auth._gate.is_authenticated


def test_guest_creates_temporary_account(server, auth):
    asyncio.run(auth.guest())

    (username,) = server.users
    assert re.fullmatch(r"guest_[a-z0-9]{6}", username)
    assert auth._gate.is_authenticated


def test_guest_credentials_are_random():
    first = make_guest_credentials()
    second = make_guest_credentials()

    assert first != second
    assert first[0].startswith("guest_")


def test_logout_clears_gate(server, auth):
    server.users["dave"] = "pw"
    asyncio.run(auth.login("dave", "pw"))

    auth.logout()

    assert not auth._gate.is_authenticated
