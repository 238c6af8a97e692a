"""
Command-line interface for knotcrypt.

This module orchestrates all other components and provides
the user-facing CLI commands:
- encrypt
- decrypt
- clean
- scan
- inspect
- help
"""

from __future__ import annotations

import sys
import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from .config import (
    DEFAULT_CONFIG_FILE,
    ENV_PASSWORD,
    HEADER_SIZE,
    KNOT_SUFFIX,
    REFS_DIRNAME,
    TOOL_VERSION,
    load_password,
)
from .container import is_container, read_header
from .errors import ConfigError, DiscoveryError, FormatError
from .file_scanner import FileScanner, default_root, find_containers
from .manifest import FilterRules
from .pipeline import (
    BatchReport,
    FileOutcome,
    Status,
    clean_all,
    decrypt_all,
    encrypt_all,
    is_affirmative,
)
from .rules import RuleEngine
from .transformer import Transformer


# ---------------------------------------------------------------------------
# Color output helpers
# ---------------------------------------------------------------------------


class Colors:
    """ANSI color codes for terminal output."""
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def printable(text: str) -> str:
    """
    Make text safe for any terminal encoding.

    Paths from undecodable file names carry surrogate escapes; they are
    turned back into their raw bytes and shown as \\xNN escapes.
    """
    try:
        raw = text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        raw = text.encode("utf-8", "backslashreplace")
    return raw.decode("utf-8", "backslashreplace")


def colored(text: str, color: str) -> str:
    """Return colored text for terminal output."""
    return f"{color}{text}{Colors.RESET}"


def print_error(msg: str) -> None:
    """Print error message to stderr."""
    print(colored(printable(f"✗ Error: {msg}"), Colors.RED), file=sys.stderr)


def print_success(msg: str) -> None:
    """Print success message."""
    print(colored(printable(f"✓ {msg}"), Colors.GREEN))


def print_warning(msg: str) -> None:
    """Print warning message."""
    print(colored(printable(f"⚠ Warning: {msg}"), Colors.YELLOW))


# ---------------------------------------------------------------------------
# CLI context
# ---------------------------------------------------------------------------


class CLIContext:
    """Shared context for CLI commands."""

    def __init__(self, verbose: bool, quiet: bool):
        self.verbose = verbose
        self.quiet = quiet
        self.cwd = Path.cwd()

    def log(self, msg: str) -> None:
        """Log message if not quiet."""
        if not self.quiet:
            print(printable(msg))

    def log_verbose(self, msg: str) -> None:
        """Log message if verbose."""
        if self.verbose:
            print(colored(printable(f"  → {msg}"), Colors.BLUE))

    def search_root(self, args: argparse.Namespace) -> Path:
        if getattr(args, "root", None):
            return Path(args.root).absolute()
        return default_root(self.cwd)

    def list_files(self, title: str, paths: Sequence[Path]) -> None:
        self.log(colored(title, Colors.BOLD))
        for path in paths:
            self.log(f"  {path}")

    def report_outcome(self, outcome: FileOutcome, verb: str) -> None:
        """Print one per-file result as soon as it is known."""
        if outcome.status is Status.SUCCEEDED:
            target = f" → {outcome.output}" if outcome.output else ""
            self.log(f"  ✓ {verb} {outcome.path}{target}")
        elif outcome.status is Status.SKIPPED:
            self.log(colored(f"  - Skipped ({outcome.message}): {outcome.path}", Colors.YELLOW))
        else:
            print_error(f"{outcome.path}: {outcome.message}")

    def summarize(self, report: BatchReport, verb: str) -> None:
        self.log("")
        done = len(report.succeeded)
        failed = len(report.failed)
        skipped = len(report.skipped)

        extra = f", {skipped} skipped" if skipped else ""
        if failed:
            print_warning(f"{verb} {done} file(s), {failed} failed{extra}")
        else:
            print_success(f"{verb} {done} file(s){extra}")


def _build_scanner(ctx: CLIContext, args: argparse.Namespace) -> FileScanner:
    rules = FilterRules.load(args.config)
    root = ctx.search_root(args)

    ctx.log_verbose(f"Config: {args.config}")
    ctx.log_verbose(f"Target extensions: {' '.join(rules.extensions) or '(none)'}")

    # The tool's own directory never takes part in the walk.
    return FileScanner(root, RuleEngine(rules), exclude=[ctx.cwd])


def _report_notes(ctx: CLIContext, scanner: FileScanner) -> None:
    for path, reason in scanner.notes:
        ctx.log(colored(f"  - Skipping {path} ({reason})", Colors.YELLOW))


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def cmd_encrypt(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Encrypt every file selected by the configuration.
    """
    scanner = _build_scanner(ctx, args)
    ctx.log(f"Searching for files with targeted extension(s) in: {scanner.root}")

    targets = scanner.scan(args.max_depth)
    _report_notes(ctx, scanner)

    if not targets:
        ctx.log(colored("No files to encrypt", Colors.YELLOW))
        return 0

    ctx.list_files(f"Target files to be encrypted ({len(targets)}):", targets)

    if args.dry_run:
        ctx.log(colored("\n[DRY RUN] No files were modified", Colors.YELLOW))
        return 0

    refs_dir = Path(args.refs_dir) if args.refs_dir else ctx.cwd / REFS_DIRNAME
    transformer = Transformer(load_password(), refs_dir=refs_dir)

    report = encrypt_all(
        targets,
        transformer,
        on_outcome=lambda o: ctx.report_outcome(o, "Encrypted"),
    )
    ctx.summarize(report, "Encrypted")
    return 0


def cmd_decrypt(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Restore every .knot container found under the search root.
    """
    root = ctx.search_root(args)
    ctx.log(f"Searching for {KNOT_SUFFIX} files in: {root}")

    containers = find_containers(root)
    if not containers:
        ctx.log(colored(f"No {KNOT_SUFFIX} files found.", Colors.YELLOW))
        return 0

    ctx.list_files("Files to be decrypted:", containers)

    transformer = Transformer(load_password())
    report = decrypt_all(
        containers,
        transformer,
        on_outcome=lambda o: ctx.report_outcome(o, "Decrypted"),
    )
    ctx.summarize(report, "Decrypted")
    return 0


def cmd_clean(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Delete .knot containers after an explicit confirmation.
    """
    root = ctx.search_root(args)
    ctx.log(f"Searching for {KNOT_SUFFIX} files in: {root}")

    containers = find_containers(root)
    if not containers:
        ctx.log(f"No {KNOT_SUFFIX} files found.")
        return 0

    def confirm(paths: Sequence[Path]) -> bool:
        ctx.list_files(f"Found the following {KNOT_SUFFIX} files:", paths)
        try:
            answer = input(colored("Are you sure you want to remove these files? (yes/no): ", Colors.YELLOW))
        except EOFError:
            # closed stdin counts as no
            ctx.log("")
            answer = ""
        return is_affirmative(answer)

    report = clean_all(
        containers,
        confirm,
        on_outcome=lambda o: ctx.report_outcome(o, "Removed"),
    )

    if report.cancelled:
        ctx.log("Operation cancelled.")
        return 0

    ctx.summarize(report, "Removed")
    return 0


def cmd_scan(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Show which files the configuration selects, and why others are left out.
    """
    scanner = _build_scanner(ctx, args)
    rules = scanner.rule_engine.rules

    ctx.log(colored("Filter configuration", Colors.BOLD))
    ctx.log(f"  Root:            {scanner.root}")
    ctx.log(f"  Extensions:      {', '.join(rules.extensions) or '(none)'}")
    ctx.log(f"  Specific files:  {', '.join(rules.specific_files) or '(none)'}")
    ctx.log(f"  Skip folders:    {', '.join(rules.skip_folders) or '(none)'}")
    ctx.log(f"  Max depth:       {args.max_depth if args.max_depth >= 0 else 'unlimited'}")
    ctx.log("")

    targets = scanner.scan(args.max_depth)

    if scanner.notes:
        ctx.log(colored("Passed over:", Colors.CYAN))
        for path, reason in scanner.notes:
            ctx.log(f"  - {path} ({reason})")
        ctx.log("")

    ctx.list_files(f"Selected files ({len(targets)}):", targets)
    return 0


def cmd_inspect(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Show the header of a .knot container.
    """
    file_path = Path(args.path)

    if not file_path.is_file():
        print_error(f"File not found: {file_path}")
        return 1

    if not is_container(file_path):
        print_warning(f"Not a Knot encrypted file: {file_path}")
        return 1

    try:
        with file_path.open("rb") as fh:
            salt, iv = read_header(fh)
    except FormatError as e:
        print_error(f"{file_path}: {e}")
        return 1

    size = file_path.stat().st_size

    ctx.log(colored("Container", Colors.BOLD))
    ctx.log(f"  File:       {file_path}")
    ctx.log(f"  Size:       {size} bytes")
    ctx.log(f"  Salt:       {salt.hex()}")
    ctx.log(f"  IV:         {iv.hex()}")
    ctx.log(f"  Payload:    {size - HEADER_SIZE} bytes")
    return 0


def cmd_help(ctx: Optional[CLIContext], args: argparse.Namespace) -> int:
    """
    Show help message.
    """
    help_text = f"""
{colored('knot', Colors.BOLD)} — encrypt files into .knot containers

{colored('USAGE:', Colors.CYAN)}
  knot <command> [options]

{colored('DESCRIPTION:', Colors.CYAN)}
  knot selects files by extension and folder rules, writes an encrypted
  <name>.knot container next to each one, and can later restore or
  remove those containers with the same password.

  The cipher is a simple XOR keystream kept for compatibility with
  existing containers. It offers no integrity protection.

{colored('COMMANDS:', Colors.CYAN)}
  encrypt     Encrypt the files selected by the configuration
  decrypt     Restore every .knot container under the search root
  clean       Remove .knot containers after confirmation
  scan        Show which files the configuration selects
  inspect     Show the header of a .knot container
  help        Show this help message

{colored('GLOBAL OPTIONS:', Colors.CYAN)}
  -v, --verbose             Enable verbose output
  -q, --quiet               Suppress non-error output
  -h, --help                Show this help message and exit

{colored('COMMAND OPTIONS:', Colors.CYAN)}
  -c, --config PATH         Filter configuration (default: {DEFAULT_CONFIG_FILE})
  --root DIR                Search root (default: parent of the working directory)
  --max-depth N             Limit the encryption walk depth (default: unlimited)
  --refs-dir DIR            Where marker files go (default: ./{REFS_DIRNAME})
  -n, --dry-run             List targets without encrypting

{colored('ENVIRONMENT:', Colors.CYAN)}
  {ENV_PASSWORD:<25} Password to use instead of prompting

{colored('EXAMPLES:', Colors.CYAN)}
  knot scan
  knot encrypt --dry-run
  knot encrypt -c config.json
  knot decrypt
  knot clean
  knot inspect notes.txt.knot

{colored('VERSION:', Colors.CYAN)}
  {TOOL_VERSION}
"""
    print(help_text)
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="knot",
        description="Encrypt files into .knot containers",
        add_help=False,
    )

    # Global options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )
    parser.add_argument(
        "-h", "--help",
        action="store_true",
        help="Show help message",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    def add_root(p: argparse.ArgumentParser) -> None:
        p.add_argument("--root", help="Search root (default: parent of the working directory)")

    def add_filter(p: argparse.ArgumentParser) -> None:
        p.add_argument("-c", "--config", default=DEFAULT_CONFIG_FILE, help="Filter configuration file")
        p.add_argument("--max-depth", type=int, default=-1, help="Maximum walk depth (-1 = unlimited)")

    # encrypt command
    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt selected files")
    add_root(encrypt_parser)
    add_filter(encrypt_parser)
    encrypt_parser.add_argument("--refs-dir", help="Directory for marker files")
    encrypt_parser.add_argument("-n", "--dry-run", action="store_true", help="List targets without encrypting")

    # decrypt command
    decrypt_parser = subparsers.add_parser("decrypt", help="Restore .knot containers")
    add_root(decrypt_parser)

    # clean command
    clean_parser = subparsers.add_parser("clean", help="Remove .knot containers")
    add_root(clean_parser)

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Show which files would be encrypted")
    add_root(scan_parser)
    add_filter(scan_parser)

    # inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Show container header")
    inspect_parser.add_argument("path", help="Path to a .knot file")

    # help command
    subparsers.add_parser("help", help="Show help message")

    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Show help if requested or no command
    if args.help or not args.command:
        return cmd_help(None, args)

    ctx = CLIContext(verbose=args.verbose, quiet=args.quiet)

    commands = {
        "encrypt": cmd_encrypt,
        "decrypt": cmd_decrypt,
        "clean": cmd_clean,
        "scan": cmd_scan,
        "inspect": cmd_inspect,
        "help": cmd_help,
    }

    cmd_func = commands.get(args.command)
    if not cmd_func:
        print_error(f"Unknown command: {args.command}")
        return 1

    try:
        return cmd_func(ctx, args)
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 130
    except (ConfigError, DiscoveryError) as e:
        print_error(str(e))
        return 1
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
