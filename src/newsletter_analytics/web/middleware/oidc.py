# ABOUTME: OIDC bearer token verification for scheduler-triggered batch endpoints.
# ABOUTME: Verification is skipped when no scheduler audience is configured.

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from newsletter_analytics.config import get_settings

log = structlog.get_logger()

GOOGLE_ISSUERS = ("https://accounts.google.com", "accounts.google.com")


def _bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer`` header.

    Raises:
        HTTPException: 401 if the header is missing or not a bearer token.
    """
    if not authorization:
        log.warning("oidc_missing_authorization")
        raise HTTPException(status_code=401, detail="Authorization header required")

    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not token:
        log.warning("oidc_invalid_auth_format")
        raise HTTPException(status_code=401, detail="Invalid authorization format")
    return token


async def verify_oidc_token(request: Request) -> str | None:
    """Verify the scheduler's Google-signed OIDC token.

    Returns:
        The caller's email (or subject), or None when verification is disabled.

    Raises:
        HTTPException: 401 if the token is missing, malformed, or invalid.
    """
    settings = get_settings()
    if not settings.scheduler_audience:
        log.debug("oidc_verification_skipped", reason="no_audience_configured")
        return None

    token = _bearer_token(request.headers.get("Authorization"))

    try:
        claims = id_token.verify_oauth2_token(
            token,
            google_requests.Request(),
            audience=settings.scheduler_audience,
        )
    except ValueError as e:
        log.warning("oidc_invalid_token", error=str(e))
        raise HTTPException(status_code=401, detail="Invalid OIDC token") from e

    issuer = claims.get("iss")
    if issuer not in GOOGLE_ISSUERS:
        log.warning("oidc_invalid_issuer", issuer=issuer)
        raise HTTPException(status_code=401, detail="Invalid token issuer")

    caller = claims.get("email", claims.get("sub"))
    log.info("oidc_verified", caller=caller)
    return caller


OIDCVerified = Annotated[str | None, Depends(verify_oidc_token)]
