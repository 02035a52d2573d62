"""Persistent request/response connection to a single Redis target."""

import socket
import threading
import time
from typing import Optional

from core.errors import SessionError, SessionStopped, TargetUnreachable

RECV_SIZE = 4096
MAX_BACKOFF = 5.0


class Session:
    """One TCP connection with transparent reconnect on failure.

    Exchanges are strictly one-at-a-time: a payload is written in full and a
    single read is assumed to return the whole status-line reply.
    """

    def __init__(
        self,
        host: str,
        port: int,
        timeout: float = 5,
        max_retries: int = 5,
        backoff: float = 0.5,
        stop: Optional[threading.Event] = None,
    ):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.max_retries = max_retries  # 0 = retry forever
        self.backoff = backoff
        self.stop = stop
        self.reconnects = 0
        self._sock: Optional[socket.socket] = None

    @classmethod
    def connect(cls, host: str, port: int, timeout: float = 5, **kwargs) -> "Session":
        """Open a session; failure here is fatal for the target."""
        session = cls(host, port, timeout=timeout, **kwargs)
        try:
            session._sock = session._open()
        except OSError as e:
            raise TargetUnreachable(host, port, _describe(e)) from e
        return session

    def _open(self) -> socket.socket:
        sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        sock.settimeout(self.timeout)
        return sock

    def _exchange(self, payload: bytes) -> bytes:
        if self._sock is None:
            raise ConnectionError("Session is not connected")
        self._sock.sendall(payload)
        received = self._sock.recv(RECV_SIZE)
        if not received:
            raise ConnectionResetError("Empty response buffer")
        return received

    def send_and_receive(self, payload: bytes) -> bytes:
        """Send payload and return the reply, reconnecting on transport errors.

        Raises:
            SessionError: max_retries consecutive reconnects failed.
            SessionStopped: stop was signalled while reconnecting.
        """
        failures = 0
        while True:
            try:
                return self._exchange(payload)
            except OSError as e:
                last_error = e
            failures += 1
            if self._stopping():
                self.close()
                raise SessionStopped(f"{self.host}:{self.port} stopped while reconnecting")
            if self.max_retries and failures > self.max_retries:
                self.close()
                raise SessionError(
                    f"{self.host}:{self.port} still failing after "
                    f"{self.max_retries} reconnect(s): {_describe(last_error)}"
                )
            self._reconnect(failures)

    def _reconnect(self, attempt: int) -> None:
        self.close()
        if self.backoff > 0:
            delay = min(self.backoff * 2 ** (attempt - 1), MAX_BACKOFF)
            if self.stop is not None:
                if self.stop.wait(delay):
                    return
            else:
                time.sleep(delay)
        if self._stopping():
            return
        self.reconnects += 1
        try:
            self._sock = self._open()
        except OSError:
            # Next exchange fails fast and counts as another attempt
            self._sock = None

    def _stopping(self) -> bool:
        return self.stop is not None and self.stop.is_set()

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
            self._sock = None

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def _describe(err: OSError) -> str:
    """Short human-readable reason, mirroring how the engine labels socket errors."""
    if isinstance(err, socket.timeout):
        return "timed out"
    if isinstance(err, ConnectionRefusedError):
        return "connection refused"
    return str(err) or err.__class__.__name__
