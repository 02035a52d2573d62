"""Worker thread logic: drain the queue and try each password."""

import threading
from typing import Callable, List, Optional

from core.errors import SessionError, SessionStopped
from core.models import SENTINEL, AuthMode, Candidate, FoundCredential, Target, escape_quotes
from core.pool import CredentialPool, WorkQueue
from core.protocol import auth_command, is_success
from core.session import Session

POLL_INTERVAL = 0.05

# Called after every exchange: (username or None, candidate, success)
AttemptHook = Callable[[Optional[str], Candidate, bool], None]


class Worker:
    """Owns one Session and checks passwords popped from the shared queue.

    In DEFAULT mode each password is tried with single-argument AUTH.  In
    ACL mode every username still in the pool is tried for the password,
    stopping at the first match; matched users are then pruned.
    """

    def __init__(
        self,
        target: Target,
        session: Session,
        work: WorkQueue,
        users: CredentialPool,
        stop: threading.Event,
        on_found: Callable[[FoundCredential], None],
        on_attempt: Optional[AttemptHook] = None,
        on_exhausted: Optional[Callable[[], None]] = None,
        stop_on_success: bool = False,
    ):
        self.target = target
        self.session = session
        self.work = work
        self.users = users
        self.stop = stop
        self.on_found = on_found
        self.on_attempt = on_attempt
        self.on_exhausted = on_exhausted
        self.stop_on_success = stop_on_success
        self.mode = AuthMode.ACL if users else AuthMode.DEFAULT
        self.attempts = 0

    def run(self) -> int:
        """Drain the queue until it is closed and empty or stop is set."""
        try:
            while not self.stop.is_set():
                candidate = self.work.pop(timeout=POLL_INTERVAL)
                if candidate is None:
                    if self.work.drained:
                        break
                    continue
                self.check_password(candidate)
        except SessionStopped:
            # Stop was already requested elsewhere
            return self.attempts
        except SessionError:
            self.stop.set()
            raise
        finally:
            self.session.close()
        return self.attempts

    def check_password(self, candidate: Candidate) -> None:
        if self.mode is AuthMode.DEFAULT:
            self._check_default(candidate)
        else:
            self._check_acl(candidate)

    def _try(self, candidate: Candidate, username: Optional[str] = None) -> bool:
        escaped_user = escape_quotes(username) if username is not None else None
        reply = self.session.send_and_receive(auth_command(candidate.escaped, escaped_user))
        self.attempts += 1
        ok = is_success(reply)
        if self.on_attempt:
            self.on_attempt(username, candidate, ok)
        return ok

    def _check_default(self, candidate: Candidate) -> None:
        if not self._try(candidate):
            return
        self.on_found(FoundCredential(
            host=self.target.host,
            port=self.target.port,
            username=SENTINEL,
            password=candidate.password,
        ))
        if self.stop_on_success:
            self.stop.set()

    def _check_acl(self, candidate: Candidate) -> None:
        matched: List[str] = []
        for user in self.users.snapshot():
            if self.stop.is_set():
                break
            if self._try(candidate, user):
                self.on_found(FoundCredential(
                    host=self.target.host,
                    port=self.target.port,
                    username=user,
                    password=candidate.password,
                ))
                matched.append(user)
                # One match per password attempt
                break

        if not matched:
            return

        remaining = self.users.prune(matched)
        if remaining == 0 and not self.stop.is_set():
            self.stop.set()
            if self.on_exhausted:
                self.on_exhausted()
