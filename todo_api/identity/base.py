from abc import ABC, abstractmethod

from todo_api.identity.schemas import AuthenticatedUser


class IdentityVerifier(ABC):
    @abstractmethod
    async def verify_token(self, token: str) -> AuthenticatedUser:
        """Resolve a bearer token to a user or raise InvalidTokenException."""
        pass

    async def close(self) -> None:
        pass
