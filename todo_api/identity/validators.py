from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from todo_api.config import Settings


def validate_identity_settings(settings: Settings):
    if settings.IDENTITY_PROVIDER == "http" and not settings.IDENTITY_VERIFY_URL:
        raise ValueError(
            "IDENTITY_VERIFY_URL must be set when IDENTITY_PROVIDER is 'http'"
        )

    if settings.IDENTITY_PROVIDER == "static" and not settings.IDENTITY_STATIC_TOKENS:
        raise ValueError(
            "IDENTITY_STATIC_TOKENS must be set when IDENTITY_PROVIDER is 'static'"
        )

    if not settings.IDENTITY_UID_CLAIMS:
        raise ValueError("IDENTITY_UID_CLAIMS must contain at least one claim name")

    return settings
