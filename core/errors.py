"""Exceptions raised by the Redline core."""


class RedlineError(Exception):
    """Base class for all Redline errors."""


class TargetUnreachable(RedlineError):
    """Initial connection to a target could not be established."""

    def __init__(self, host: str, port: int, reason: str = ""):
        self.host = host
        self.port = port
        self.reason = reason
        msg = f"Unable to connect to {host}:{port}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class SessionError(RedlineError):
    """Reconnect attempts were exhausted mid-run."""


class AclUnsupported(RedlineError):
    """Target rejects two-argument AUTH (Redis < 6)."""


class SessionStopped(SessionError):
    """Stop was signalled while the session was reconnecting."""
