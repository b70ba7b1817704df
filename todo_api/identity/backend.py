from todo_api.config import Settings
from todo_api.identity.base import IdentityVerifier
from todo_api.identity.http_verifier import HttpIdentityVerifier
from todo_api.identity.static import StaticIdentityVerifier


def get_identity_verifier_backend(settings: Settings) -> IdentityVerifier:
    if settings.IDENTITY_PROVIDER == "http":
        if not settings.IDENTITY_VERIFY_URL:
            raise ValueError("IDENTITY_VERIFY_URL is required for the http provider")
        return HttpIdentityVerifier(
            verify_url=settings.IDENTITY_VERIFY_URL,
            uid_claims=settings.IDENTITY_UID_CLAIMS,
            user_agent=settings.USER_AGENT,
            timeout=settings.IDENTITY_REQUEST_TIMEOUT,
        )
    elif settings.IDENTITY_PROVIDER == "static":
        return StaticIdentityVerifier(tokens=settings.IDENTITY_STATIC_TOKENS)
    else:
        raise ValueError(
            f"Unsupported identity provider: {settings.IDENTITY_PROVIDER}"
        )
