"""GoogleTokenVerifier tests with real RS256 tokens.

Learn: We generate a throwaway RSA key pair, sign ID tokens with it, and
hand the verifier a stub JWKS client that returns the matching public
key. Everything else (signature, exp, aud, iss, sub checks) is the real
PyJWT path.
"""

import time
from types import SimpleNamespace

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from apikey_manager.auth.google import GoogleTokenVerifier, TokenError

CLIENT_ID = "test-client.apps.googleusercontent.com"


def _rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


SIGNING_KEY = _rsa_key()
OTHER_KEY = _rsa_key()


class StubJWKSClient:
    def __init__(self, public_key):
        self.public_key = public_key

    def get_signing_key_from_jwt(self, token):
        return SimpleNamespace(key=self.public_key)


def _claims(**overrides):
    now = int(time.time())
    claims = {
        "iss": "https://accounts.google.com",
        "aud": CLIENT_ID,
        "sub": "110169484474386276334",
        "email": "alice@example.com",
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    return {k: v for k, v in claims.items() if v is not None}


def _token(key=SIGNING_KEY, **overrides):
    return jwt.encode(_claims(**overrides), key, algorithm="RS256")


@pytest.fixture()
def verifier():
    return GoogleTokenVerifier(
        client_id=CLIENT_ID,
        jwks_client=StubJWKSClient(SIGNING_KEY.public_key()),
        leeway=0,
    )


def test_valid_token(verifier):
    payload = verifier.verify(_token())
    assert payload["sub"] == "110169484474386276334"
    assert payload["email"] == "alice@example.com"


def test_subject_is_stable(verifier):
    """Two tokens for the same account resolve to the same subject."""
    first = verifier.verify(_token())
    second = verifier.verify(_token(iat=int(time.time()) - 5))
    assert first["sub"] == second["sub"]


def test_short_issuer_form_accepted(verifier):
    assert verifier.verify(_token(iss="accounts.google.com"))["sub"]


def test_expired_token(verifier):
    past = int(time.time()) - 7200
    with pytest.raises(TokenError, match="expired"):
        verifier.verify(_token(iat=past, exp=past + 60))


def test_wrong_audience(verifier):
    with pytest.raises(TokenError):
        verifier.verify(_token(aud="someone-else.apps.googleusercontent.com"))


def test_wrong_issuer(verifier):
    with pytest.raises(TokenError, match="issuer"):
        verifier.verify(_token(iss="https://evil.example.com"))


def test_missing_subject(verifier):
    with pytest.raises(TokenError):
        verifier.verify(_token(sub=None))


def test_signed_by_other_key(verifier):
    with pytest.raises(TokenError):
        verifier.verify(_token(key=OTHER_KEY))


def test_hs256_token_rejected(verifier):
    forged = jwt.encode(_claims(), "shared-secret-that-is-long-enough-for-hs256", algorithm="HS256")
    with pytest.raises(TokenError):
        verifier.verify(forged)


def test_garbage_token(verifier):
    with pytest.raises(TokenError):
        verifier.verify("not-a-jwt")


def test_jwks_lookup_failure_is_token_error():
    class FailingJWKSClient:
        def get_signing_key_from_jwt(self, token):
            raise jwt.PyJWKClientError("Unable to find a signing key that matches")

    verifier = GoogleTokenVerifier(client_id=CLIENT_ID, jwks_client=FailingJWKSClient())
    with pytest.raises(TokenError):
        verifier.verify(_token())
