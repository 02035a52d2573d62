"""Data models for Redline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

DEFAULT_PORT = 6379
SENTINEL = "n/a"


class AuthMode(Enum):
    DEFAULT = "DEFAULT"
    ACL = "ACL"


class ProbeResult(Enum):
    NO_AUTH = "NO_AUTH"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AMBIGUOUS = "AMBIGUOUS"


class TargetStatus(Enum):
    COMPLETED = "COMPLETED"
    NO_AUTH = "NO_AUTH"
    AMBIGUOUS = "AMBIGUOUS"
    EXHAUSTED = "EXHAUSTED"
    STOPPED = "STOPPED"
    UNREACHABLE = "UNREACHABLE"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Target:
    host: str
    port: int = DEFAULT_PORT

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


def escape_quotes(value: str) -> str:
    """Escape single quotes for embedding in a quoted AUTH argument."""
    return value.replace("'", "\\'")


@dataclass(frozen=True)
class Candidate:
    password: str
    escaped: str

    @classmethod
    def from_line(cls, line: str) -> "Candidate":
        return cls(password=line, escaped=escape_quotes(line))


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


@dataclass(frozen=True)
class FoundCredential:
    host: str
    port: int
    username: str = SENTINEL
    password: str = SENTINEL
    timestamp: str = field(default_factory=utc_timestamp)
    proof: str = ""

    @property
    def is_no_auth(self) -> bool:
        """True for the finding recorded when a target requires no password."""
        return self.username == SENTINEL and self.password == SENTINEL

    def to_record(self) -> dict:
        record = {
            "timestamp": self.timestamp,
            "host": self.host,
            "port": self.port,
            "username": self.username,
            "password": self.password,
        }
        if self.proof:
            record["proof"] = self.proof
        return record


@dataclass
class TargetReport:
    target: Target
    status: TargetStatus = TargetStatus.COMPLETED
    mode: Optional[AuthMode] = None
    attempts: int = 0
    found: List[FoundCredential] = field(default_factory=list)
    message: str = ""
    elapsed: float = 0.0
