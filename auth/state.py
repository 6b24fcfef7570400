"""
Observable session state shared by everything that needs to know who is
signed in.

Subscribers are called synchronously, in subscription order, with the new
SessionSnapshot. Subscriber errors are logged but never propagate: the state
change has already happened. All writes must come from the thread that owns
the state object.
"""

import logging
import threading
from typing import Callable

from auth.types import Session, SessionSnapshot, User

logger = logging.getLogger(__name__)

Subscriber = Callable[[SessionSnapshot], None]


class SessionState:
    """
    Single source of truth for the current user and session.

    Usage:
        state = SessionState()
        unsubscribe = state.subscribe(lambda snap: print(snap.is_authenticated))
        ...
        unsubscribe()
    """

    def __init__(self):
        self._snapshot = SessionSnapshot()
        self._subscribers: list[Subscriber] = []
        self._owner_thread = threading.get_ident()

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def is_authenticated(self) -> bool:
        return self._snapshot.is_authenticated

    @property
    def current_user(self) -> User | None:
        return self._snapshot.user

    @property
    def session(self) -> Session | None:
        return self._snapshot.session

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register callback for every future change.

        Returns:
            A function that removes the subscription. Safe to call twice.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def establish(self, user: User, session: Session) -> None:
        """Publish a new session, superseding any previous one."""
        if session.issued_for is None:
            session = session.model_copy(update={"issued_for": user.id})
        self._publish(SessionSnapshot(is_authenticated=True, user=user, session=session))

    def restore(self, session: Session) -> None:
        """Mark authenticated from a persisted token. No user snapshot is known yet."""
        self._publish(SessionSnapshot(is_authenticated=True, user=None, session=session))

    def clear(self) -> None:
        self._publish(SessionSnapshot())

    def _publish(self, snapshot: SessionSnapshot) -> None:
        if threading.get_ident() != self._owner_thread:
            raise RuntimeError(
                "SessionState written from a thread that does not own it. "
                "Hand the result back to the owning thread before publishing."
            )

        self._snapshot = snapshot

        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception(
                    "Session subscriber %s failed",
                    getattr(callback, "__name__", repr(callback)),
                )
