"""Tests for core.probe."""

import pytest

from core.errors import AclUnsupported
from core.models import ProbeResult
from core.probe import check_acl_support, classify_probe, probe_auth
from core.session import Session


@pytest.mark.parametrize(
    "reply, expected",
    [
        (b"-NOAUTH Authentication required.\r\n", ProbeResult.AUTH_REQUIRED),
        (b"+PONG\r\n", ProbeResult.NO_AUTH),
        (b"$5\r\nHELLO\r\n", ProbeResult.NO_AUTH),
        (b"-ERR unknown command 'PING'\r\n", ProbeResult.AMBIGUOUS),
        (b"\xff\xfe\x00garbage", ProbeResult.AMBIGUOUS),
        (b"HTTP/1.1 400 Bad Request\r\n", ProbeResult.AMBIGUOUS),
    ],
)
def test_classify_probe(reply, expected):
    assert classify_probe(reply) is expected


@pytest.mark.parametrize("probe", ["ping", "echo"])
def test_probe_detects_no_auth(fake_redis, probe):
    server = fake_redis()
    with Session.connect("127.0.0.1", server.port, timeout=2) as session:
        assert probe_auth(session, probe) is ProbeResult.NO_AUTH


@pytest.mark.parametrize("probe", ["ping", "echo"])
def test_probe_detects_auth_required(fake_redis, probe):
    server = fake_redis(requirepass="s3cret")
    with Session.connect("127.0.0.1", server.port, timeout=2) as session:
        assert probe_auth(session, probe) is ProbeResult.AUTH_REQUIRED


def test_probe_rejects_unknown_command(fake_redis):
    server = fake_redis()
    with Session.connect("127.0.0.1", server.port, timeout=2) as session:
        with pytest.raises(ValueError):
            probe_auth(session, "info")


def test_acl_support_check_raises_on_old_server(fake_redis):
    server = fake_redis(requirepass="s3cret", acl=False)
    with Session.connect("127.0.0.1", server.port, timeout=2) as session:
        with pytest.raises(AclUnsupported):
            check_acl_support(session)


def test_acl_support_check_uses_random_pair(fake_redis):
    server = fake_redis(users={"alice": {"pw"}})
    with Session.connect("127.0.0.1", server.port, timeout=2) as session:
        check_acl_support(session)
        check_acl_support(session)
    first, second = server.auth_log
    assert len(first) == 2
    assert first != second
