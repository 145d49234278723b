import hashlib
import json
import time
from typing import Any

from jwcrypto import jwk, jwt
from jwcrypto.common import JWException, base64url_encode
from pydantic import ValidationError

from catalog.constants import TOKEN_ALGORITHM
from catalog.exceptions import AuthenticationError
from catalog.schemas.user import Identity
from catalog.settings import app_settings


def signing_key(secret: str) -> jwk.JWK:
    """
    Derive the HS256 signing key from the shared secret.

    HS256 needs a 256-bit key, so the secret is hashed with SHA-256
    rather than used as raw key material. Secrets of any length work.

    Args:
        secret: Shared signing secret.

    Returns:
        Symmetric JWK usable for signing and verification.
    """
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return jwk.JWK(kty="oct", k=base64url_encode(digest))


class TokenManager:
    """
    Issues and verifies the service's signed access tokens.

    Tokens are compact JWS objects signed with a shared secret. They embed
    `{username, id}` and, only when a TTL is configured, an `exp` claim.
    """

    def __init__(self, secret: str, ttl_seconds: int | None = None) -> None:
        """
        Initialize the manager.

        Args:
            secret: Shared signing secret.
            ttl_seconds: Token lifetime. None issues tokens that never
                expire.
        """
        self._key = signing_key(secret)
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_settings(cls) -> "TokenManager":
        """Build a manager from the application settings."""
        return cls(
            app_settings.JWT_SECRET.get_secret_value(),
            app_settings.TOKEN_TTL_SECONDS,
        )

    def issue(self, identity: Identity) -> str:
        """
        Sign a token for an identity.

        Args:
            identity: Username and user ID to embed.

        Returns:
            Serialized token.

        Example:
            >>> manager = TokenManager("s3cr3t")
            >>> value = manager.issue(Identity(username="mluukkai", id=1))
        """
        claims: dict[str, Any] = identity.model_dump()
        if self.ttl_seconds is not None:
            claims["exp"] = int(time.time()) + self.ttl_seconds

        token = jwt.JWT(
            header={"alg": TOKEN_ALGORITHM, "typ": "JWT"}, claims=claims
        )
        token.make_signed_token(self._key)
        return token.serialize()

    def decode(self, value: str) -> Identity:
        """
        Verify a token and return the identity it carries.

        Args:
            value: Serialized token.

        Returns:
            The embedded identity.

        Raises:
            AuthenticationError: If the token is malformed, has a bad
                signature, has expired or lacks the expected claims.
        """
        try:
            token = jwt.JWT(
                jwt=value,
                key=self._key,
                algs=[TOKEN_ALGORITHM],
                expected_type="JWS",
            )
            return Identity(**json.loads(token.claims))
        except jwt.JWTExpired as ex:
            raise AuthenticationError(f"token expired: {ex}") from ex
        except (JWException, ValueError, TypeError, ValidationError) as ex:
            raise AuthenticationError(f"invalid token: {ex}") from ex
