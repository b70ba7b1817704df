import logging
from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from todo_api.common.exceptions import UnauthenticatedException
from todo_api.identity.base import IdentityVerifier
from todo_api.identity.exceptions import InvalidTokenException
from todo_api.identity.schemas import AuthenticatedUser

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(
    auto_error=False,
    description="ID token issued by the identity provider",
)


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.identity_verifier


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> AuthenticatedUser:
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedException(
            "Unauthorized: No authentication token provided."
        )

    try:
        return await verifier.verify_token(credentials.credentials)
    except InvalidTokenException as e:
        logger.warning(f"API Auth Error: Invalid or expired ID token: {e}")
        raise UnauthenticatedException(
            "Unauthorized: Invalid or expired token."
        ) from e
