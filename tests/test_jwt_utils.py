"""Tests for unverified JWT claim decoding."""

from __future__ import annotations

import base64

import pytest

from conftest import make_jwt
from podcast_auth.exceptions import TokenDecodeError
from podcast_auth.jwt_utils import decode_token_payload, get_expiry, is_approved


class TestDecodeTokenPayload:
    """Tests for decode_token_payload."""

    def test_decodes_claims(self) -> None:
        """Payload claims are returned as a dict."""
        token = make_jwt({"sub": "abc", "email": "a@example.com"})
        assert decode_token_payload(token) == {"sub": "abc", "email": "a@example.com"}

    def test_handles_stripped_padding(self) -> None:
        """Payloads whose length is not a multiple of four still decode."""
        token = make_jwt({"a": "bc"})
        assert decode_token_payload(token)["a"] == "bc"

    @pytest.mark.parametrize("token", ["", "onlyone", "a.b", "a.b.c.d", "a..c"])
    def test_rejects_wrong_shape(self, token: str) -> None:
        """Anything other than three non-empty-payload parts is rejected."""
        with pytest.raises(TokenDecodeError):
            decode_token_payload(token)

    def test_rejects_non_json_payload(self) -> None:
        """A payload that is not JSON is rejected."""
        segment = base64.urlsafe_b64encode(b"not json").decode().rstrip("=")
        with pytest.raises(TokenDecodeError):
            decode_token_payload(f"h.{segment}.s")

    def test_rejects_non_object_payload(self) -> None:
        """A JSON array payload is rejected."""
        segment = base64.urlsafe_b64encode(b"[1, 2]").decode().rstrip("=")
        with pytest.raises(TokenDecodeError):
            decode_token_payload(f"h.{segment}.s")


class TestGetExpiry:
    """Tests for get_expiry."""

    def test_returns_milliseconds(self) -> None:
        """exp seconds are converted to epoch milliseconds."""
        assert get_expiry(make_jwt({"exp": 1_700_000_000})) == 1_700_000_000_000

    def test_fractional_exp(self) -> None:
        """Fractional exp values are accepted."""
        assert get_expiry(make_jwt({"exp": 1.5})) == 1500

    @pytest.mark.parametrize("exp", [None, "1700000000", True])
    def test_rejects_invalid_exp(self, exp) -> None:
        """Missing, string and boolean exp claims are rejected."""
        claims = {} if exp is None else {"exp": exp}
        with pytest.raises(TokenDecodeError, match="exp"):
            get_expiry(make_jwt(claims))


class TestIsApproved:
    """Tests for the custom:approved claim."""

    @pytest.mark.parametrize("value", [True, "true", 1, "1"])
    def test_accepted_encodings(self, value) -> None:
        """Exactly True, "true", 1 and "1" count as approved."""
        assert is_approved(make_jwt({"custom:approved": value})) is True

    @pytest.mark.parametrize("value", [False, "false", 0, "0", "TRUE", "yes", 2, 1.0, None])
    def test_rejected_encodings(self, value) -> None:
        """Every other value counts as not approved."""
        assert is_approved(make_jwt({"custom:approved": value})) is False

    def test_missing_claim(self) -> None:
        """A token without the claim is not approved."""
        assert is_approved(make_jwt({"sub": "x"})) is False
