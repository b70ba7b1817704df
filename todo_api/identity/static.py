import secrets
from collections.abc import Mapping

from todo_api.identity.base import IdentityVerifier
from todo_api.identity.exceptions import InvalidTokenException
from todo_api.identity.schemas import AuthenticatedUser


class StaticIdentityVerifier(IdentityVerifier):
    """Verifies tokens against a fixed token -> uid table.

    Intended for local development and tests, where running a real identity
    provider is not worth the trouble.
    """

    def __init__(self, tokens: Mapping[str, str]):
        self.tokens = dict(tokens)

    async def verify_token(self, token: str) -> AuthenticatedUser:
        matched_uid: str | None = None
        # No early exit: the loop takes the same time whichever entry matches
        for known_token, uid in self.tokens.items():
            if secrets.compare_digest(known_token.encode(), token.encode()):
                matched_uid = uid

        if matched_uid is None:
            raise InvalidTokenException("Token is not recognised")

        return AuthenticatedUser(uid=matched_uid, claims={"uid": matched_uid})
