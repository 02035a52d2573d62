"""Redis inline-command helpers.

Redline speaks just enough of the inline protocol to issue PING/ECHO and
AUTH and to read single status lines back.  Replies are classified by
prefix only; multi-bulk and typed replies are never parsed.
"""

from typing import Optional

import redis

from core.models import SENTINEL

CRLF = "\r\n"
SUCCESS_BYTE = 0x2B  # '+'

PROBE_COMMANDS = {
    "ping": b"PING\r\n",
    "echo": b"ECHO HELLO\r\n",
}

# Replies meaning the probe ran without authentication
NO_AUTH_MARKERS = (b"+PONG", b"$5\r\nHELLO")
NOAUTH_PREFIX = b"-NOAUTH"
WRONG_ARGS_PREFIX = b"-ERR wrong number of arguments"


def auth_command(escaped_password: str, escaped_username: Optional[str] = None) -> bytes:
    """Build a quoted AUTH command from already-escaped arguments."""
    if escaped_username is None:
        cmd = f"AUTH '{escaped_password}'{CRLF}"
    else:
        cmd = f"AUTH '{escaped_username}' '{escaped_password}'{CRLF}"
    return cmd.encode("utf-8")


def is_success(reply: bytes) -> bool:
    return bool(reply) and reply[0] == SUCCESS_BYTE


def reply_text(reply: bytes) -> str:
    """Decode a reply for display without ever raising on bad bytes."""
    return reply.decode("utf-8", errors="replace").strip()


def verify_access(host: str, port: int, username: str, password: str, timeout: int = 5) -> Optional[str]:
    """Run INFO server with the recovered credential as proof of access.

    Best-effort: returns None when the server cannot be queried.
    """
    client = redis.Redis(
        host=host,
        port=port,
        password=password if password != SENTINEL else None,
        username=username if username != SENTINEL else None,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    try:
        info = client.info("server")
    except redis.exceptions.RedisError:
        return None
    finally:
        client.close()
    version = info.get("redis_version", "?")
    os_info = info.get("os", "?")
    return f"Redis {version} on {os_info}"
