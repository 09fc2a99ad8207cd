"""Google ID token verification.

Learn: A Google ID token is an RS256 JWT. Verifying it means:
- the signature matches one of Google's current public keys (JWKS),
- it is not expired,
- `aud` is our OAuth client id (a token minted for another app is rejected),
- `iss` is Google.

PyJWKClient fetches the JWKS document once and caches the keys, so a
steady-state verification is pure CPU work.
"""

from typing import Optional

import jwt

from apikey_manager.config import GOOGLE_CERTS_URL

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


class TokenError(Exception):
    """Raised when an ID token cannot be verified."""


class GoogleTokenVerifier:
    """Verify Google ID tokens for a single OAuth client id."""

    def __init__(
        self,
        client_id: str,
        certs_url: str = GOOGLE_CERTS_URL,
        jwks_client: Optional[jwt.PyJWKClient] = None,
        leeway: int = 10,
    ):
        self.client_id = client_id
        self.jwks_client = jwks_client or jwt.PyJWKClient(certs_url)
        self.leeway = leeway

    def verify(self, token: str) -> dict:
        """Verify and decode an ID token.

        Returns the claims dict on success.
        Raises TokenError on failure.
        """
        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(token)
            payload = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.client_id,
                leeway=self.leeway,
                options={"require": ["exp", "iat", "iss", "aud", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token has expired")
        except jwt.PyJWTError as e:
            raise TokenError(f"Invalid token: {e}")

        if payload.get("iss") not in GOOGLE_ISSUERS:
            raise TokenError(f"Invalid issuer: {payload.get('iss')}")
        if not payload.get("sub"):
            raise TokenError("Token has no subject")
        return payload
