"""
tests/test_jwt_startup.py — Signing Key Checks & Bearer Parsing
================================================================
The API must refuse to start when JWT_SECRET is missing, blank, too short,
or a known weak default.  get_current_user_id() must turn a valid bearer
token into its ``sub`` and reject everything else with 401.
"""

from __future__ import annotations

import importlib
import os
from unittest.mock import patch

import jwt
import pytest

from whereto.errors import UnauthorizedError


class TestJWTSecretValidation:
    """Reloading deps re-runs _load_jwt_secret() against the patched env."""

    def _reload_secret(self) -> str:
        import whereto.api.deps as deps_mod
        importlib.reload(deps_mod)
        return deps_mod.JWT_SECRET

    def test_rejects_unset_secret(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("JWT_SECRET", None)
            with pytest.raises(RuntimeError, match="JWT_SECRET is missing"):
                self._reload_secret()

    @pytest.mark.parametrize("value,message", [
        ("", "JWT_SECRET is missing"),
        ("   ", "JWT_SECRET is missing"),
        ("whereto-dev-secret-change-me", "placeholder value"),
        ("CHANGE-ME", "placeholder value"),
        ("tooshort", "at least 32"),
    ])
    def test_rejects_bad_secret(self, value, message):
        with patch.dict(os.environ, {"JWT_SECRET": value}):
            with pytest.raises(RuntimeError, match=message):
                self._reload_secret()

    def test_accepts_strong_secret(self):
        good_secret = "k" * 48
        with patch.dict(os.environ, {"JWT_SECRET": good_secret}):
            assert self._reload_secret() == good_secret

    @pytest.fixture(autouse=True)
    def _restore_module(self):
        """Put the suite's secret back and rebuild deps for later tests."""
        original = os.environ.get("JWT_SECRET")
        yield
        if original is not None:
            os.environ["JWT_SECRET"] = original
        else:
            os.environ.pop("JWT_SECRET", None)
        import whereto.api.deps as deps_mod
        try:
            importlib.reload(deps_mod)
        except RuntimeError:
            pass  # no usable secret in this environment


class TestCurrentUserId:
    def _token(self, payload: dict) -> str:
        from whereto.api.deps import JWT_ALGORITHM, JWT_SECRET
        return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

    def test_returns_subject(self):
        from whereto.api.deps import get_current_user_id
        assert get_current_user_id(f"Bearer {self._token({'sub': 'u-42'})}") == "u-42"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Basic abc", "Bearer not-a-jwt"])
    def test_rejects_malformed_header(self, header):
        from whereto.api.deps import get_current_user_id
        with pytest.raises(UnauthorizedError) as exc:
            get_current_user_id(header)
        assert exc.value.status_code == 401

    def test_rejects_missing_subject(self):
        from whereto.api.deps import get_current_user_id
        with pytest.raises(UnauthorizedError):
            get_current_user_id(f"Bearer {self._token({'name': 'x'})}")
