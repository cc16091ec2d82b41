import json
import logging
from pathlib import Path

import pytest

from tbo.config import Settings, load_settings
from tbo.domain.errors import AuthorizationError
from tbo.logging_config import JsonFormatter
from tbo.services.auth_service import AuthService, LoginPolicy, hash_password, verify_password


def _auth(**policy):
    return AuthService({"Amir": "password", "Jack": "secret"}, LoginPolicy(**policy), rounds=1000)


def test_hash_and_verify_password():
    stored = hash_password("s3cret", rounds=1000)
    assert stored.startswith("pbkdf2_sha256$1000$")
    assert verify_password(stored, "s3cret")
    assert not verify_password(stored, "other")
    assert not verify_password("garbage", "s3cret")


def test_login_success_and_failure():
    auth = _auth()
    assert auth.login(" Amir ", "password").username == "Amir"
    with pytest.raises(AuthorizationError, match="Invalid username or password"):
        auth.login("Amir", "nope")
    with pytest.raises(AuthorizationError, match="Invalid username or password"):
        auth.login("Nobody", "password")
    with pytest.raises(AuthorizationError, match="Username is required"):
        auth.login("  ", "password")


def test_lockout_after_repeated_failures():
    auth = _auth(max_failed_attempts=3, lockout_seconds=60)
    for _ in range(2):
        with pytest.raises(AuthorizationError, match="Invalid"):
            auth.login("Jack", "wrong")
    with pytest.raises(AuthorizationError, match="Too many failed attempts"):
        auth.login("Jack", "wrong")
    with pytest.raises(AuthorizationError, match="temporarily locked"):
        auth.login("Jack", "secret")


def test_expired_lockout_allows_login():
    auth = _auth(max_failed_attempts=1, lockout_seconds=0)
    with pytest.raises(AuthorizationError):
        auth.login("Jack", "wrong")
    assert auth.login("Jack", "secret").username == "Jack"


def test_load_settings_defaults():
    s = load_settings({})
    assert s == Settings()
    assert s.users == {"Amir": "password", "Jack": "password"}


def test_load_settings_from_env():
    s = load_settings({
        "TBO_USERS": "ana:pw1, bad, bob:pw2",
        "TBO_EXPENSE_HOLDER": "Ana",
        "TBO_SEED_DEMO": "false",
    })
    assert s.users == {"ana": "pw1", "bob": "pw2"}
    assert s.expense_holder == "Ana"
    assert s.seed_demo is False


def test_container_without_seed_is_empty():
    from tbo.application.container import build_container

    c = build_container(Settings(seed_demo=False))
    assert c.persons.list_persons() == []
    assert c.products.list_products() == []


def test_json_formatter_emits_one_object_per_record():
    rec = logging.LogRecord("tbo.ledger", logging.INFO, __file__, 1, "transaction_added id=%s", ("x",), None)
    payload = json.loads(JsonFormatter().format(rec))
    assert payload["logger"] == "tbo.ledger"
    assert payload["message"] == "transaction_added id=x"
    assert payload["level"] == "INFO"
