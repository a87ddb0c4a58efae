"""Bearer token issuing and verification (signed JWT)."""

from __future__ import annotations

import time
from typing import Any, Iterable, Optional

from jose import JWTError, jwt

ACCESS_SUBJECT = "access"


class TokenError(Exception):
    """Raised when a bearer token cannot be trusted."""


def issue_token(
    payload: dict[str, Any],
    *,
    secret: str,
    issuer: str,
    algorithm: str,
    subject: str = ACCESS_SUBJECT,
    expires_in: Optional[int] = None,
) -> str:
    """Sign ``payload`` adding iss/sub/iat (and exp when expires_in > 0)."""
    now = int(time.time())
    claims = dict(payload)
    claims.update({"iss": issuer, "sub": subject, "iat": now})
    if expires_in:
        claims["exp"] = now + int(expires_in)
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_token(
    token: str,
    *,
    secret: str,
    issuer: str,
    algorithms: Iterable[str],
    subject: str = ACCESS_SUBJECT,
) -> dict[str, Any]:
    """Check signature, algorithm, issuer, subject and expiry; return the claims."""
    if not token:
        raise TokenError("missing token")
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=list(algorithms),
            issuer=issuer,
            subject=subject,
        )
    except JWTError as exc:
        raise TokenError(str(exc)) from exc
    if not claims.get("id"):
        raise TokenError("token has no identity")
    return claims
