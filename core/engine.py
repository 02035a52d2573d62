"""Brute-force engine: per-target probe, producer and worker pool with Rich progress."""

import dataclasses
import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn
from rich.text import Text

from core.errors import AclUnsupported, SessionError, TargetUnreachable
from core.models import (
    SENTINEL,
    AuthMode,
    Candidate,
    FoundCredential,
    ProbeResult,
    Target,
    TargetReport,
    TargetStatus,
)
from core.pool import CredentialPool, WorkQueue, produce
from core.probe import check_acl_support, probe_auth
from core.protocol import verify_access
from core.session import Session
from core.sink import ResultSink
from core.theme import REDLINE_THEME, MOCHA
from core.worker import Worker

console = Console(theme=REDLINE_THEME)


def mask_password(password: str) -> str:
    """Mask a password for display (e.g. 'EricLikesRunning800' -> 'Er***00')."""
    if not password or password == SENTINEL:
        return password
    if len(password) <= 4:
        return password[0] + "***"
    return password[:2] + "***" + password[-2:]


class BruteEngine:
    """Runs the probe and the concurrent password search, one target at a time."""

    def __init__(
        self,
        threads: int = 5,
        timeout: int = 5,
        max_retries: int = 5,
        backoff: float = 0.5,
        probe: str = "ping",
        stop_on_success: bool = False,
        sink: Optional[ResultSink] = None,
        verify: bool = False,
        debug: bool = False,
        mask_creds: bool = False,
        show_progress: bool = True,
    ):
        if threads < 1:
            raise ValueError("threads must be at least 1")
        self.threads = threads
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self.probe = probe
        self.stop_on_success = stop_on_success
        self.sink = sink if sink is not None else ResultSink()
        self.verify = verify
        self.debug = debug
        self.mask_creds = mask_creds
        self.show_progress = show_progress
        self.reports: List[TargetReport] = []
        self.elapsed: Optional[float] = None
        self._lock = threading.Lock()

    def _session(self, target: Target, stop: Optional[threading.Event] = None) -> Session:
        return Session.connect(
            target.host,
            target.port,
            timeout=self.timeout,
            max_retries=self.max_retries,
            backoff=self.backoff,
            stop=stop,
        )

    def run(self, targets: Sequence[Target], passfile: str, usernames: Sequence[str] = ()) -> List[TargetReport]:
        """Process every target in order; targets never overlap."""
        start_time = time.monotonic()
        for target in targets:
            report = self.run_target(target, passfile, usernames)
            self.reports.append(report)
        self.elapsed = time.monotonic() - start_time
        return self.reports

    def run_target(self, target: Target, passfile: str, usernames: Sequence[str] = ()) -> TargetReport:
        mode = AuthMode.ACL if usernames else AuthMode.DEFAULT
        report = TargetReport(target=target, mode=mode)
        start = time.monotonic()
        console.print(f"\n[heading]Target {target}[/heading] [dim]({mode.value} mode)[/dim]")
        try:
            with self._session(target) as session:
                result = probe_auth(session, self.probe)
                if result is ProbeResult.NO_AUTH:
                    report.status = TargetStatus.NO_AUTH
                    report.message = "No authentication required"
                    self._record(report, FoundCredential(host=target.host, port=target.port))
                    return report
                if result is ProbeResult.AMBIGUOUS:
                    report.status = TargetStatus.AMBIGUOUS
                    report.message = "Unrecognised probe response, skipping"
                    console.print(f"  [warn][!] {target}: unrecognised probe response, skipping[/warn]")
                    return report
                if mode is AuthMode.ACL:
                    check_acl_support(session)
            self._brute(target, passfile, usernames, report)
        except TargetUnreachable as e:
            report.status = TargetStatus.UNREACHABLE
            report.message = str(e)
            console.print(f"  [failure][-] {e}[/failure]")
        except (SessionError, AclUnsupported) as e:
            report.status = TargetStatus.ERROR
            report.message = str(e)
            console.print(f"  [error][-] {e}[/error]")
        finally:
            report.elapsed = time.monotonic() - start
        return report

    def _brute(self, target: Target, passfile: str, usernames: Sequence[str], report: TargetReport) -> None:
        stop = threading.Event()
        sessions: List[Session] = []
        try:
            for _ in range(self.threads):
                sessions.append(self._session(target, stop))
        except TargetUnreachable:
            for s in sessions:
                s.close()
            raise

        exhausted = threading.Event()
        work = WorkQueue()
        users = CredentialPool(usernames)

        with Progress(
            SpinnerColumn(style=MOCHA["mauve"]),
            TextColumn(f"[{MOCHA['blue']}]" + "{task.description}" + f"[/{MOCHA['blue']}]"),
            BarColumn(complete_style=MOCHA["green"], finished_style=MOCHA["green"], pulse_style=MOCHA["mauve"]),
            TextColumn(f"[{MOCHA['subtext0']}]" + "{task.completed} attempts" + f"[/{MOCHA['subtext0']}]"),
            TimeElapsedColumn(),
            console=console,
            disable=not self.show_progress,
        ) as progress:
            task_id = progress.add_task(f"Brute forcing {target}...", total=None)

            def on_found(found: FoundCredential) -> None:
                self._record(report, found, progress)

            def on_attempt(username: Optional[str], candidate: Candidate, ok: bool) -> None:
                progress.advance(task_id)
                if self.debug:
                    self._print_debug(target, username, candidate, ok)

            def on_exhausted() -> None:
                if not exhausted.is_set():
                    exhausted.set()
                    progress.console.print(f"  [success][*] All users recovered for {target}, stopping.[/success]")

            workers = [
                Worker(
                    target,
                    session,
                    work,
                    users,
                    stop,
                    on_found=on_found,
                    on_attempt=on_attempt,
                    on_exhausted=on_exhausted,
                    stop_on_success=self.stop_on_success,
                )
                for session in sessions
            ]

            errors: List[BaseException] = []
            interrupted = False
            with ThreadPoolExecutor(max_workers=self.threads + 1) as executor:
                futures = [executor.submit(produce, passfile, work, stop)]
                futures.extend(executor.submit(w.run) for w in workers)
                try:
                    for future in as_completed(futures):
                        err = future.exception()
                        if err is not None:
                            stop.set()
                            errors.append(err)
                except KeyboardInterrupt:
                    progress.console.print("\n[warn]Interrupted, stopping workers...[/warn]")
                    stop.set()
                    interrupted = True

            progress.update(task_id, total=progress.tasks[0].completed)

        report.attempts = sum(w.attempts for w in workers)
        if interrupted:
            report.status = TargetStatus.STOPPED
            report.message = "Interrupted by user"
            self.reports.append(report)
            raise KeyboardInterrupt
        if errors:
            report.status = TargetStatus.ERROR
            report.message = str(errors[0])
            progress.console.print(f"  [error][-] {target}: {errors[0]}[/error]")
        elif exhausted.is_set():
            report.status = TargetStatus.EXHAUSTED
            report.message = "All users recovered"
        elif stop.is_set():
            report.status = TargetStatus.STOPPED
            report.message = "Stopped after first valid password"
        else:
            report.status = TargetStatus.COMPLETED
            report.message = "Wordlist exhausted"

    def _record(self, report: TargetReport, found: FoundCredential, progress: Optional[Progress] = None) -> None:
        if self.verify:
            proof = verify_access(found.host, found.port, found.username, found.password, timeout=self.timeout)
            if proof:
                found = dataclasses.replace(found, proof=proof)
        self.sink.record(found)
        with self._lock:
            report.found.append(found)

        out = progress.console if progress is not None else console
        hit_text = Text("  ")
        hit_text.append("[+]", style="hit")
        if found.is_no_auth:
            hit_text.append(f" redis://{report.target} - ")
            hit_text.append("no authentication required", style="hit.cred")
        else:
            pwd = mask_password(found.password) if self.mask_creds else found.password
            label = "Valid password" if found.username == SENTINEL else "Valid credentials"
            cred = pwd if found.username == SENTINEL else f"{found.username}:{pwd}"
            hit_text.append(f" redis://{report.target} - {label}: ")
            hit_text.append(cred, style="hit.cred")
        if found.proof:
            hit_text.append(f" | {found.proof}", style="dim")
        out.print(hit_text)

    def _print_debug(self, target: Target, username: Optional[str], candidate: Candidate, ok: bool) -> None:
        """Print raw unformatted debug line to stderr."""
        pwd_display = mask_password(candidate.password) if self.mask_creds else candidate.password
        parts = [
            f"[DEBUG] {'SUCCESS' if ok else 'FAILURE'}",
            f"target={target}",
            f"user={username if username is not None else SENTINEL}",
            f"pass={pwd_display}",
        ]
        line = " | ".join(parts)
        with self._lock:
            sys.stderr.write(line + "\n")
            sys.stderr.flush()
