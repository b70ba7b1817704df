import asyncio
import inspect
import logging
from types import TracebackType
from typing import Awaitable, Callable, Type
from pydantic import BaseModel, ConfigDict

from todo_api.identity.base import IdentityVerifier
from todo_api.identity.exceptions import InvalidTokenException
from todo_api.identity.schemas import AuthenticatedUser


logger = logging.getLogger(__name__)


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: AuthenticatedUser | None = None
    id_token: str | None = None
    loading: bool = True


SessionListener = Callable[[SessionState], Awaitable[None] | None]


class Subscription:
    """A single listener registration on an AuthSession.

    Every subscription drains its own queue from one task, so the listener
    sees each state change exactly once and in the order it was published.
    """

    def __init__(self, session: "AuthSession", listener: SessionListener):
        self._session = session
        self._listener = listener
        self._queue: asyncio.Queue[SessionState] = asyncio.Queue()
        self._task = asyncio.create_task(self._deliver())

    @property
    def active(self) -> bool:
        return not self._task.done()

    def push(self, state: SessionState) -> None:
        self._queue.put_nowait(state)

    async def _deliver(self) -> None:
        while True:
            state = await self._queue.get()
            try:
                result = self._listener(state)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Session listener raised while handling a change")
            finally:
                self._queue.task_done()

    async def drain(self) -> None:
        """Wait until every queued change has been delivered."""
        if self.active:
            await self._queue.join()

    def unsubscribe(self) -> None:
        self._session._remove(self)
        self._task.cancel()


class AuthSession:
    """Holds the identity the client is currently signed in as.

    Create one per client process and pass it to whatever needs to know
    who is signed in.
    """

    def __init__(self, verifier: IdentityVerifier):
        self.verifier = verifier
        self._state = SessionState()
        self._subscriptions: list[Subscription] = []

    async def __aenter__(self):
        return self

    async def __aexit__(
        self, exc_type: Type[Exception], exc: Exception, tb: TracebackType
    ):
        await self.close()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_user(self) -> AuthenticatedUser | None:
        return self._state.user

    @property
    def id_token(self) -> str | None:
        return self._state.id_token

    def subscribe(self, listener: SessionListener) -> Subscription:
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        if not self._state.loading:
            subscription.push(self._state)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def _publish(self, state: SessionState) -> None:
        self._state = state
        for subscription in list(self._subscriptions):
            subscription.push(state)

    async def sign_in(self, id_token: str) -> AuthenticatedUser:
        try:
            user = await self.verifier.verify_token(id_token)
        except InvalidTokenException:
            self._publish(SessionState(loading=False))
            raise

        logger.info(f"Signed in as '{user.uid}'")
        self._publish(SessionState(user=user, id_token=id_token, loading=False))
        return user

    def sign_out(self) -> None:
        if self._state.user:
            logger.info(f"Signed out '{self._state.user.uid}'")
        self._publish(SessionState(loading=False))

    async def close(self) -> None:
        subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            subscription.unsubscribe()
        await asyncio.gather(
            *(subscription._task for subscription in subscriptions),
            return_exceptions=True,
        )
        await self.verifier.close()
