"""Input parsing for targets and username lists."""

from pathlib import Path
from typing import List

from core.models import DEFAULT_PORT, Target
from core.pool import iter_wordlist


def parse_target(target_str: str) -> Target:
    """Parse 'host', 'host:port' or '[v6addr]:port'. Port defaults to 6379."""
    value = target_str.strip()
    if not value:
        raise ValueError("Empty target")

    if value.startswith("["):
        host, sep, rest = value[1:].partition("]")
        if not sep:
            raise ValueError(f"Invalid target '{target_str}': missing ']'")
        port_str = rest[1:] if rest.startswith(":") else ""
    elif value.count(":") == 1:
        host, port_str = value.split(":")
    else:
        # Bare host, or unbracketed IPv6 address with no port
        host, port_str = value, ""

    if not host:
        raise ValueError(f"Invalid target '{target_str}': missing host")

    if not port_str:
        return Target(host=host, port=DEFAULT_PORT)
    try:
        port = int(port_str)
    except ValueError:
        raise ValueError(f"Invalid port in target '{target_str}'")
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range in target '{target_str}'")
    return Target(host=host, port=port)


def _read_lines(filepath: str, kind: str) -> List[str]:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"{kind} file not found: {filepath}")
    return path.read_text(encoding="utf-8", errors="replace").splitlines()


def parse_targets_file(filepath: str) -> List[Target]:
    """Parse a file with one target per line."""
    targets = []
    for line in _read_lines(filepath, "Targets"):
        line = line.strip()
        if line and not line.startswith("#"):
            targets.append(parse_target(line))
    return targets


def parse_users_file(filepath: str) -> List[str]:
    """Load usernames for ACL mode, dropping blanks, non-UTF-8 lines and duplicates in order."""
    if not Path(filepath).exists():
        raise FileNotFoundError(f"User file not found: {filepath}")
    users = []
    seen = set()
    for name in iter_wordlist(filepath):
        if name.strip() and name not in seen:
            seen.add(name)
            users.append(name)
    return users


def check_wordlist(filepath: str) -> Path:
    """Fail fast if the password wordlist cannot be opened."""
    path = Path(filepath)
    if not path.is_file():
        raise FileNotFoundError(f"Password file not found: {filepath}")
    with path.open("rb"):
        pass
    return path
