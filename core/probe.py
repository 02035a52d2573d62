"""Pre-flight checks run once per target before any worker is started."""

import secrets

from core.errors import AclUnsupported
from core.models import ProbeResult
from core.protocol import (
    NO_AUTH_MARKERS,
    NOAUTH_PREFIX,
    PROBE_COMMANDS,
    WRONG_ARGS_PREFIX,
    auth_command,
    reply_text,
)
from core.session import Session


def classify_probe(reply: bytes) -> ProbeResult:
    if reply.startswith(NOAUTH_PREFIX):
        return ProbeResult.AUTH_REQUIRED
    if reply.startswith(NO_AUTH_MARKERS):
        return ProbeResult.NO_AUTH
    return ProbeResult.AMBIGUOUS


def probe_auth(session: Session, probe: str = "ping") -> ProbeResult:
    """Send a no-op command and classify whether the target demands AUTH."""
    try:
        payload = PROBE_COMMANDS[probe]
    except KeyError:
        raise ValueError(f"Unknown probe '{probe}' (expected one of {', '.join(PROBE_COMMANDS)})") from None
    return classify_probe(session.send_and_receive(payload))


def check_acl_support(session: Session) -> None:
    """Confirm the target accepts two-argument AUTH.

    A random user/password pair is sent; servers without ACL support reply
    with a wrong-number-of-arguments error.

    Raises:
        AclUnsupported: two-argument AUTH is rejected.
    """
    dummy = auth_command(secrets.token_hex(16), secrets.token_hex(16))
    reply = session.send_and_receive(dummy)
    if reply.startswith(WRONG_ARGS_PREFIX):
        raise AclUnsupported(
            f"{session.host}:{session.port} does not support AUTH <user> <pass> "
            f"(Redis 6+ required for ACL mode): {reply_text(reply)}"
        )
