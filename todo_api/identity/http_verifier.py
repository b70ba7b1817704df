import asyncio
import logging
from typing import Any
from aiohttp import ClientError, ClientSession, ClientTimeout

from todo_api.identity.base import IdentityVerifier
from todo_api.identity.exceptions import InvalidTokenException
from todo_api.identity.schemas import AuthenticatedUser


logger = logging.getLogger(__name__)


class HttpIdentityVerifier(IdentityVerifier):
    """Verifies bearer tokens by presenting them to the identity provider.

    The provider endpoint is expected to behave like an OIDC userinfo endpoint:
    200 with a JSON object of claims for a valid token, any other status
    otherwise. The user id is taken from the first configured claim present.
    """

    def __init__(
        self,
        *,
        verify_url: str,
        uid_claims: list[str],
        user_agent: str,
        timeout: float,
    ):
        self.verify_url = verify_url
        self.uid_claims = uid_claims
        self.user_agent = user_agent
        self.timeout = ClientTimeout(total=timeout)
        self.session: ClientSession | None = None

    def _get_session(self) -> ClientSession:
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                timeout=self.timeout,
            )
        return self.session

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    def extract_uid(self, claims: dict[str, Any]) -> str:
        for claim in self.uid_claims:
            value = claims.get(claim)
            if isinstance(value, str) and value:
                return value

        raise InvalidTokenException(
            f"Token claims do not contain any of: {', '.join(self.uid_claims)}"
        )

    async def verify_token(self, token: str) -> AuthenticatedUser:
        session = self._get_session()

        try:
            async with session.get(
                self.verify_url, headers={"Authorization": f"Bearer {token}"}
            ) as response:
                if response.status != 200:
                    raise InvalidTokenException(
                        f"Identity provider rejected token with status {response.status}"
                    )
                claims = await response.json(content_type=None)
        except InvalidTokenException:
            raise
        except (ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Identity provider request failed: {e!r}")
            raise InvalidTokenException("Identity provider unavailable") from e
        except ValueError as e:
            raise InvalidTokenException(
                "Identity provider returned a malformed response"
            ) from e

        if not isinstance(claims, dict):
            raise InvalidTokenException(
                "Identity provider returned a malformed response"
            )

        return AuthenticatedUser(uid=self.extract_uid(claims), claims=claims)
