#!/usr/bin/env python3
"""Redline - Redis AUTH / ACL Brute Forcer.

For authorized security testing only.
"""

import sys
from pathlib import Path

# Allow running directly with `python redline.py` without installing
if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).parent))

import click
from rich.console import Console

from core.engine import BruteEngine
from core.input_parser import check_wordlist, parse_target, parse_targets_file, parse_users_file
from core.output import FAILED_STATUSES, print_banner, print_results_table
from core.protocol import PROBE_COMMANDS
from core.sink import ResultSink
from core.theme import REDLINE_THEME

console = Console(theme=REDLINE_THEME)


@click.command()
@click.option("-t", "--target", "target_str", default="127.0.0.1:6379", show_default=True, help="Target (host or host:port)")
@click.option("-T", "--targets-file", help="File with targets (one host:port per line)")
@click.option("-U", "--userfile", help="Username wordlist file (enables ACL mode)")
@click.option("-P", "--passfile", required=True, help="Password wordlist file")
@click.option("-w", "--threads", default=5, show_default=True, type=click.IntRange(min=1), help="Worker threads per target")
@click.option("--timeout", default=5, show_default=True, type=click.IntRange(min=1), help="Read/write timeout per attempt (seconds)")
@click.option("--retries", default=5, show_default=True, type=click.IntRange(min=0), help="Reconnect attempts before giving up on a target (0 = unlimited)")
@click.option("--backoff", default=0.5, show_default=True, type=click.FloatRange(min=0), help="Initial reconnect backoff (seconds, doubles per retry)")
@click.option("--probe", type=click.Choice(sorted(PROBE_COMMANDS)), default="ping", show_default=True, help="Command used to detect whether AUTH is required")
@click.option("--stop-on-success", is_flag=True, help="Stop a target after the first valid password (non-ACL mode)")
@click.option("--verify", is_flag=True, help="Run INFO server with each recovered credential")
@click.option("--mask-creds", is_flag=True, help="Mask credentials in console output (for screenshots/screen shares)")
@click.option("--debug", is_flag=True, help="Show raw unformatted output for every attempt")
@click.option("--dry-run", is_flag=True, help="Show what would be tested without sending any traffic")
@click.option("-o", "--output", "output_file", help="Append findings to this file as JSON lines (truncated at start)")
def main(
    target_str,
    targets_file,
    userfile,
    passfile,
    threads,
    timeout,
    retries,
    backoff,
    probe,
    stop_on_success,
    verify,
    mask_creds,
    debug,
    dry_run,
    output_file,
):
    """Redline - Redis AUTH / ACL Brute Forcer.

    Detects whether a Redis server requires a password and, if so, works
    through a wordlist over concurrent connections.  Supplying a user list
    switches to ACL mode (AUTH <user> <pass>).
    For authorized security testing only.
    """
    print_banner()

    # --- Parse targets ---
    try:
        if targets_file:
            targets = parse_targets_file(targets_file)
        else:
            targets = [parse_target(target_str)]
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[failure]Error: {e}[/failure]")
        sys.exit(1)

    if not targets:
        console.print("[failure]Error: No targets specified. Use -t or -T.[/failure]")
        sys.exit(1)

    # --- Load wordlists ---
    try:
        check_wordlist(passfile)
        usernames = parse_users_file(userfile) if userfile else []
    except OSError as e:
        console.print(f"[failure]Error: {e}[/failure]")
        sys.exit(1)

    if userfile and not usernames:
        console.print("[failure]Error: User file is empty.[/failure]")
        sys.exit(1)

    console.print(f"  [label]Targets:[/label]  [value]{len(targets)}[/value]")
    console.print(f"  [label]Mode:[/label]     [value]{'ACL' if usernames else 'DEFAULT'}[/value]")
    if usernames:
        console.print(f"  [label]Users:[/label]    [value]{len(usernames)}[/value]")
    console.print(f"  [label]Threads:[/label]  [value]{threads}[/value]")

    if dry_run:
        from core.output import print_dry_run
        print_dry_run(targets, usernames, passfile, threads, probe=probe)
        return

    try:
        sink = ResultSink(output_file)
    except OSError as e:
        console.print(f"[failure]Error: Unable to prepare output file: {e}[/failure]")
        sys.exit(1)

    engine = BruteEngine(
        threads=threads,
        timeout=timeout,
        max_retries=retries,
        backoff=backoff,
        probe=probe,
        stop_on_success=stop_on_success,
        sink=sink,
        verify=verify,
        debug=debug,
        mask_creds=mask_creds,
    )

    try:
        reports = engine.run(targets, passfile, usernames)
    except KeyboardInterrupt:
        console.print("\n[warn]Interrupted by user.[/warn]")
        reports = engine.reports

    print_results_table(reports, elapsed=engine.elapsed, mask_creds=mask_creds)

    if output_file:
        console.print(f"\n  [info]Findings written to {output_file}[/info]")

    if any(r.status in FAILED_STATUSES for r in reports):
        sys.exit(1)


if __name__ == "__main__":
    main()
