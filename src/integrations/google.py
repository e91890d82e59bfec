"""Google ID token verification."""

import asyncio

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from pydantic import BaseModel

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")

# One pooled HTTP session for every certificate fetch.
_http_request = google_requests.Request()


class GoogleUserInfo(BaseModel):
    """Verified identity claims extracted from a Google ID token."""

    sub: str
    email: str
    name: str
    picture: str | None = None


def verify_google_credential(credential: str, client_id: str) -> GoogleUserInfo:
    """Verify a Google Sign-In credential issued for ``client_id``.

    google-auth fetches Google's signing keys over a shared HTTP session and
    checks the signature, audience and expiry. The email must also be verified.

    Raises:
        ValueError: If any check fails.
    """
    claims = id_token.verify_oauth2_token(
        credential, _http_request, client_id
    )

    if claims.get("iss") not in GOOGLE_ISSUERS:
        raise ValueError("Invalid issuer")
    if not claims.get("email_verified"):
        raise ValueError("Email not verified")
    if not claims.get("email"):
        raise ValueError("Email claim missing")

    return GoogleUserInfo(
        sub=claims["sub"],
        email=claims["email"].lower(),
        name=claims.get("name") or claims["email"],
        picture=claims.get("picture"),
    )


async def verify_google_credential_async(
    credential: str, client_id: str
) -> GoogleUserInfo:
    """Run verification off the event loop; key fetching is blocking I/O."""
    return await asyncio.to_thread(verify_google_credential, credential, client_id)
