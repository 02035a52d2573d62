"""Shared fixtures: an in-process fake Redis speaking the inline protocol."""

import socket
import socketserver
import threading

import pytest

from core.models import Target

NOAUTH = b"-NOAUTH Authentication required.\r\n"
WRONGPASS = b"-WRONGPASS invalid username-password pair or user is disabled.\r\n"
WRONG_ARGS = b"-ERR wrong number of arguments for 'auth' command\r\n"


def parse_inline(line):
    """Split an inline command, honouring single quotes and \\' inside them."""
    args, buf = [], []
    quoted = started = False
    i = 0
    while i < len(line):
        ch = line[i]
        if quoted:
            if ch == "\\" and line[i + 1:i + 2] == "'":
                buf.append("'")
                i += 2
                continue
            if ch == "'":
                quoted = False
            else:
                buf.append(ch)
        elif ch == "'":
            quoted = started = True
        elif ch.isspace():
            if started:
                args.append("".join(buf))
                buf, started = [], False
        else:
            buf.append(ch)
            started = True
        i += 1
    if started:
        args.append("".join(buf))
    return args


class _RedisHandler(socketserver.StreamRequestHandler):
    def handle(self):
        server = self.server
        if server.take_drop():
            self.rfile.readline()
            return
        authed = False
        drop_at = server.take_drop_after()
        handled = 0
        while True:
            raw = self.rfile.readline()
            if not raw:
                break
            if drop_at is not None and handled >= drop_at:
                return
            handled += 1
            args = parse_inline(raw.decode("utf-8").rstrip("\r\n"))
            if not args:
                continue
            cmd = args[0].upper()
            if cmd == "AUTH":
                reply, ok = server.auth(args[1:])
                authed = authed or ok
            elif cmd in ("PING", "ECHO") and server.ping_reply is not None:
                reply = server.ping_reply
            elif server.requires_auth and not authed:
                reply = NOAUTH
            elif cmd == "PING":
                reply = b"+PONG\r\n"
            elif cmd == "ECHO":
                value = args[1].encode()
                reply = b"$%d\r\n%s\r\n" % (len(value), value)
            else:
                reply = b"-ERR unknown command\r\n"
            self.wfile.write(reply)


class FakeRedis(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, requirepass=None, users=None, acl=True, ping_reply=None, drop_connections=0, drop_after=None):
        super().__init__(("127.0.0.1", 0), _RedisHandler)
        self.requirepass = requirepass
        self.users = users or {}
        self.acl = acl
        self.ping_reply = ping_reply
        self.drop_connections = drop_connections
        self.dropped = 0
        self.drop_after = drop_after
        self.auth_log = []
        self.lock = threading.Lock()

    @property
    def requires_auth(self):
        return self.requirepass is not None or bool(self.users)

    @property
    def port(self):
        return self.server_address[1]

    @property
    def target(self):
        return Target(host="127.0.0.1", port=self.port)

    def take_drop(self):
        with self.lock:
            if self.dropped < self.drop_connections:
                self.dropped += 1
                return True
            return False

    def take_drop_after(self):
        """Hand the one-shot mid-connection drop to the first caller."""
        with self.lock:
            drop_at, self.drop_after = self.drop_after, None
            return drop_at

    def auth(self, args):
        with self.lock:
            self.auth_log.append(tuple(args))
        if len(args) == 1:
            ok = self.requirepass is not None and args[0] == self.requirepass
        elif len(args) == 2:
            if not self.acl:
                return WRONG_ARGS, False
            ok = args[1] in self.users.get(args[0], ())
        else:
            return b"-ERR syntax error\r\n", False
        return (b"+OK\r\n", True) if ok else (WRONGPASS, False)

    def passwords_tried(self):
        """Single-argument AUTH passwords, in arrival order."""
        with self.lock:
            return [a[0] for a in self.auth_log if len(a) == 1]


@pytest.fixture
def fake_redis():
    servers = []

    def start(**kwargs):
        server = FakeRedis(**kwargs)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


@pytest.fixture
def wordlist(tmp_path):
    def write(lines, name="passwords.txt"):
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return str(path)

    return write


@pytest.fixture
def closed_port():
    """A localhost port with nothing listening on it."""
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
