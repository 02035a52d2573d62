"""Rich output formatting for brute-force results (Catppuccin Mocha themed)."""

from typing import List, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from core.engine import mask_password
from core.models import SENTINEL, AuthMode, TargetReport, TargetStatus, Target
from core.theme import REDLINE_THEME, MOCHA

console = Console(theme=REDLINE_THEME)

STATUS_STYLES = {status: f"status.{status.value.lower()}" for status in TargetStatus}

# Statuses that make the run exit non-zero
FAILED_STATUSES = (TargetStatus.UNREACHABLE, TargetStatus.ERROR)


def print_results_table(reports: List[TargetReport], elapsed: float = None, mask_creds: bool = False) -> None:
    """Print a per-target table followed by the recovered credentials."""
    if not reports:
        console.print("[warn]No results to display.[/warn]")
        return

    table = Table(
        title="Targets",
        show_header=True,
        header_style="table.header",
        border_style=MOCHA["surface2"],
        title_style=f"bold {MOCHA['mauve']}",
    )
    table.add_column("Target", style="table.target")
    table.add_column("Mode", style="table.mode")
    table.add_column("Status", justify="center")
    table.add_column("Attempts", justify="right")
    table.add_column("Found", justify="right")
    table.add_column("Message", style="table.msg")

    for r in reports:
        style = STATUS_STYLES.get(r.status, "value")
        table.add_row(
            str(r.target),
            r.mode.value if r.mode else "",
            f"[{style}]{r.status.value}[/{style}]",
            str(r.attempts),
            str(len(r.found)),
            r.message,
        )

    console.print()
    console.print(table)

    print_summary(reports, elapsed=elapsed)
    print_valid_creds(reports, mask_creds=mask_creds)


def print_summary(reports: List[TargetReport], elapsed: float = None) -> None:
    """Print a summary of target outcomes."""
    counts = {}
    for r in reports:
        counts[r.status] = counts.get(r.status, 0) + 1

    console.print(f"\n[heading]Summary:[/heading]")
    for status in TargetStatus:
        count = counts.get(status, 0)
        if not count:
            continue
        style = STATUS_STYLES.get(status, "value")
        console.print(f"  [{style}]{status.value}: {count}[/{style}]")
    console.print(f"  [value]Targets: {len(reports)}[/value]")
    console.print(f"  [value]Attempts: {sum(r.attempts for r in reports)}[/value]")

    if elapsed is not None:
        minutes, seconds = divmod(elapsed, 60)
        if minutes > 0:
            time_str = f"{int(minutes)}m {seconds:.1f}s"
        else:
            time_str = f"{seconds:.1f}s"
        console.print(f"  [info]Elapsed: {time_str}[/info]")


def print_valid_creds(reports: List[TargetReport], mask_creds: bool = False) -> None:
    """Print a clean table of only the working credentials."""
    hits = [(r.target, f) for r in reports for f in r.found]
    if not hits:
        console.print(f"\n  [dim]No valid credentials found.[/dim]")
        return

    table = Table(
        title="Valid Credentials",
        show_header=True,
        header_style="table.header",
        border_style=MOCHA["surface2"],
        title_style=f"bold {MOCHA['green']}",
        padding=(0, 1),
    )
    table.add_column("Target", style="table.target")
    table.add_column("Username", style="table.user")
    table.add_column("Password", style="table.pass")
    table.add_column("Found", style="dim")

    has_proof = any(f.proof for _, f in hits)
    if has_proof:
        table.add_column("Proof", style="dim")

    prev_target = None
    for target, f in hits:
        if prev_target is not None and target != prev_target:
            table.add_section()
        password = escape(f.password)
        if mask_creds and password != SENTINEL:
            password = escape(mask_password(f.password))
        if f.is_no_auth:
            password = "[status.no_auth](no auth required)[/status.no_auth]"
        row = [str(target), escape(f.username), password, f.timestamp]
        if has_proof:
            row.append(f.proof or "")
        table.add_row(*row)
        prev_target = target

    console.print()
    console.print(table)
    console.print(f"\n  [success]{len(hits)} finding(s) across {len(set(t for t, _ in hits))} target(s).[/success]")


def print_dry_run(
    targets: Sequence[Target],
    usernames: Sequence[str],
    passfile: str,
    threads: int,
    probe: str = "ping",
) -> None:
    """Show what would be tested without sending traffic."""
    mode = AuthMode.ACL if usernames else AuthMode.DEFAULT

    console.print(f"\n[heading]DRY RUN: no traffic will be sent[/heading]\n")

    tgt_table = Table(
        title="Targets",
        header_style="table.header",
        border_style=MOCHA["surface2"],
        title_style=f"bold {MOCHA['sapphire']}",
    )
    tgt_table.add_column("#", style="dim", justify="right")
    tgt_table.add_column("Host", style="table.target")
    tgt_table.add_column("Port", style="value", justify="right")
    tgt_table.add_column("Mode", style="table.mode")

    for i, t in enumerate(targets, 1):
        tgt_table.add_row(str(i), t.host, str(t.port), mode.value)
    console.print(tgt_table)

    if usernames:
        user_table = Table(
            title="Users",
            header_style="table.header",
            border_style=MOCHA["surface2"],
            title_style=f"bold {MOCHA['sapphire']}",
        )
        user_table.add_column("#", style="dim", justify="right")
        user_table.add_column("Username", style="table.user")
        for i, name in enumerate(usernames, 1):
            user_table.add_row(str(i), escape(name))
        console.print()
        console.print(user_table)

    console.print(f"\n  [label]Probe:[/label]    [value]{probe.upper()}[/value]")
    console.print(f"  [label]Wordlist:[/label] [value]{passfile}[/value]")
    console.print(f"  [label]Threads:[/label]  [value]{threads} per target[/value]")
    console.print(f"  [dim]Run without --dry-run to execute.[/dim]\n")


def print_banner() -> None:
    """Print the Redline banner in Catppuccin Mocha gradient."""
    colors = [
        MOCHA["red"],
        MOCHA["maroon"],
        MOCHA["pink"],
        MOCHA["mauve"],
        MOCHA["lavender"],
    ]
    lines = [
        r"  ____          _ _ _            ",
        r" |  _ \ ___  __| | (_)_ __   ___ ",
        r" | |_) / _ \/ _` | | | '_ \ / _ \ ",
        r" |  _ <  __/ (_| | | | | | |  __/",
        r" |_| \_\___|\__,_|_|_|_| |_|\___|",
    ]
    console.print()
    for line, color in zip(lines, colors):
        console.print(Text(line, style=f"bold {color}"))
    console.print(f"  [{MOCHA['lavender']}]Redis AUTH / ACL Brute Forcer[/{MOCHA['lavender']}]")
    console.print(f"  [{MOCHA['overlay1']}]For authorized security testing only[/{MOCHA['overlay1']}]\n")
