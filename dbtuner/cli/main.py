"""dbtuner: CLI entrypoint for the database schema report generator."""

from __future__ import annotations

import argparse
import importlib.metadata
import json
import os
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# stdout is reserved for the report itself when it falls back to the console.
console = Console(stderr=True)


def _dbtuner_version() -> str:
    try:
        return importlib.metadata.version("dbtuner")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0+local"


def _apply_user_profile_defaults() -> None:
    """Apply ~/.dbtuner/config.yaml defaults into env when keys are missing."""
    from dbtuner.cli.user_config import load_user_config, profile_env_defaults

    profile = load_user_config()
    if not profile:
        return
    for key, value in profile_env_defaults(profile).items():
        if not os.getenv(key):
            os.environ[key] = value


def _coerce_bool(value: object, default: bool = False) -> bool:
    """Coerce mixed config values into bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _mask_secret(value: str) -> str:
    text = value.strip()
    if not text:
        return ""
    if len(text) <= 6:
        return "*" * len(text)
    return f"{text[:3]}...{text[-2:]}"


# ---------------------------------------------------------------------------
# schema
# ---------------------------------------------------------------------------


def cmd_schema(args: argparse.Namespace) -> None:
    """Generate the schema report for the target database."""
    import pymssql
    from pydantic import ValidationError

    from dbtuner.core.config import get_settings
    from dbtuner.core.database import PreconditionError, normalize_target_db
    from dbtuner.core.logging import set_run_id, setup_logging
    from dbtuner.core.providers import get_metadata_provider
    from dbtuner.report.driver import SectionError, generate_report
    from dbtuner.report.sections import REPORT_VERSION

    try:
        settings = get_settings(
            target_db=args.target_db,
            output_dir=args.output_dir,
            safe_mode=args.safe_mode,
            export_schema=False if args.no_schema else None,
            db_host=args.host,
            db_port=args.port,
            db_user=args.user,
            log_level=args.log_level,
        )
        normalize_target_db(settings.target_db)
        setup_logging(settings.log_level)
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    run_id = set_run_id()
    console.print(f"[bold]Database Tuner Schema {REPORT_VERSION}[/bold] [dim](run {run_id})[/dim]")

    try:
        with console.status(
            f"[bold cyan]Exporting schema of {settings.target_db}...[/bold cyan]",
            spinner="dots",
        ):
            with get_metadata_provider(settings) as provider:
                result = generate_report(settings, provider)
    except PreconditionError as exc:
        console.print(f"[red]Precondition failed:[/red] {exc}")
        sys.exit(1)
    except SectionError as exc:
        console.print(f"[red]Report aborted:[/red] {exc}")
        sys.exit(1)
    except pymssql.Error as exc:
        console.print(f"[red]Database error:[/red] {exc}")
        sys.exit(1)
    except RuntimeError as exc:
        console.print(f"[red]Report failed:[/red] {exc}")
        sys.exit(1)

    if result.path is None:
        location = "[yellow]stdout (output directory unavailable)[/yellow]"
    else:
        location = str(result.path)
    console.print()
    console.print(
        Panel(
            f"[bold green]Database Tuner Schema Complete[/bold green]\n\n"
            f"[cyan]Target DB:[/cyan] {settings.target_db}\n"
            f"[cyan]Sections:[/cyan] {len(result.sections)}\n"
            f"[cyan]Safe Mode:[/cyan] {'On' if settings.safe_mode else 'Off'}\n"
            f"[cyan]Markdown Saved:[/cyan] {location}",
            title="dbtuner schema",
            border_style="green",
        )
    )
    console.print()


# ---------------------------------------------------------------------------
# sections
# ---------------------------------------------------------------------------


def cmd_sections(args: argparse.Namespace) -> None:
    """List report sections in output order."""
    from dbtuner.report.sections import SCHEMA_SECTIONS

    if args.json:
        print(
            json.dumps(
                [
                    {
                        "key": s.key,
                        "title": s.title,
                        "kind": s.kind,
                        "source": s.source,
                        "why": s.why,
                    }
                    for s in SCHEMA_SECTIONS
                ],
                indent=2,
            )
        )
        return

    table = Table(title="Report sections")
    table.add_column("#", justify="right")
    table.add_column("Key", style="cyan")
    table.add_column("Title")
    table.add_column("Block")
    for idx, section in enumerate(SCHEMA_SECTIONS, start=1):
        table.add_row(str(idx), section.key, section.title, section.kind)
    console.print(table)


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


def cmd_config_show(args: argparse.Namespace) -> None:
    """Show current user-level dbtuner config (~/.dbtuner/config.yaml)."""
    from dbtuner.cli.user_config import load_user_config, user_config_path

    cfg = load_user_config()
    path = user_config_path()
    if not cfg:
        if args.json:
            print(json.dumps({"path": str(path), "config": {}}, indent=2))
            return
        console.print()
        console.print(
            Panel(
                "[yellow]No global config found.[/yellow]\n\n"
                "Run `dbtuner config set` to create one.",
                title=f"dbtuner config ({path})",
                border_style="yellow",
            )
        )
        console.print()
        return

    output = dict(cfg)
    secret = str(output.get("db_password", "")).strip()
    if secret and not args.reveal_secrets:
        output["db_password"] = _mask_secret(secret)

    if args.json:
        print(json.dumps({"path": str(path), "config": output}, indent=2, default=str))
        return

    keys = (
        "target_db",
        "output_dir",
        "safe_mode",
        "export_schema",
        "db_host",
        "db_port",
        "db_user",
        "db_password",
    )
    lines = [f"[cyan]Path:[/cyan] {path}"]
    lines.extend(f"[cyan]{key}:[/cyan] {output.get(key, '(not set)')}" for key in keys)
    lines.append(f"[cyan]updated_at:[/cyan] {output.get('updated_at', '(unknown)')}")
    console.print()
    console.print(Panel("\n".join(lines), title="dbtuner config", border_style="green"))
    console.print()


def cmd_config_set(args: argparse.Namespace) -> None:
    """Set user-level dbtuner config values (~/.dbtuner/config.yaml)."""
    from dbtuner.cli.user_config import save_user_config

    updates: dict[str, object] = {}
    if args.target_db is not None:
        updates["target_db"] = args.target_db.strip()
    if args.output_dir is not None:
        updates["output_dir"] = args.output_dir.strip()
    if args.safe_mode is not None:
        updates["safe_mode"] = _coerce_bool(args.safe_mode, default=True)
    if args.export_schema is not None:
        updates["export_schema"] = _coerce_bool(args.export_schema, default=True)
    if args.db_host is not None:
        updates["db_host"] = args.db_host.strip()
    if args.db_port is not None:
        updates["db_port"] = args.db_port
    if args.db_user is not None:
        updates["db_user"] = args.db_user.strip()
    if args.db_password is not None:
        updates["db_password"] = args.db_password
    if args.unset_db_password:
        updates["db_password"] = ""

    if not updates:
        console.print("[red]Error:[/red] No values provided. Use --help for options.")
        sys.exit(1)

    path = save_user_config(updates)
    shown = dict(updates)
    if "db_password" in shown:
        shown["db_password"] = _mask_secret(str(shown["db_password"])) or "(cleared)"

    if args.json:
        print(json.dumps({"status": "ok", "path": str(path), "updated": shown}, indent=2))
        return

    lines = [f"[cyan]Path:[/cyan] {path}", "[cyan]Updated:[/cyan]"]
    lines.extend(f"  - {key}: {value}" for key, value in shown.items())
    console.print()
    console.print(Panel("\n".join(lines), title="dbtuner config set", border_style="green"))
    console.print()


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the dbtuner CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="dbtuner",
        description="Database Tuner: read-only Markdown schema report for SQL Server",
    )
    parser.add_argument("--version", action="version", version=f"dbtuner {_dbtuner_version()}")
    sub = parser.add_subparsers(dest="command", help="Available commands")

    # --- schema ---
    p_schema = sub.add_parser("schema", help="Generate the schema report")
    p_schema.add_argument("--target-db", help="Database to profile (overrides TARGET_DB)")
    p_schema.add_argument(
        "--output-dir",
        help="Directory for the report file; falls back to stdout when unavailable",
    )
    safe_group = p_schema.add_mutually_exclusive_group()
    safe_group.add_argument(
        "--safe-mode",
        dest="safe_mode",
        action="store_const",
        const=True,
        default=None,
        help="Redact definitions and extended property values (default)",
    )
    safe_group.add_argument(
        "--no-safe-mode",
        dest="safe_mode",
        action="store_const",
        const=False,
        help="Include definition bodies and extended property values",
    )
    p_schema.add_argument(
        "--no-schema",
        action="store_true",
        help="Skip the schema section set (header and brief only)",
    )
    p_schema.add_argument("--host", help="SQL Server host (overrides DB_HOST)")
    p_schema.add_argument("--port", type=int, help="SQL Server port (overrides DB_PORT)")
    p_schema.add_argument("--user", help="SQL Server login (overrides DB_USER)")
    p_schema.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for JSON logs on stderr (overrides LOG_LEVEL)",
    )
    p_schema.set_defaults(func=cmd_schema)

    # --- sections ---
    p_sections = sub.add_parser("sections", help="List report sections in output order")
    p_sections.add_argument("--json", action="store_true", help="Output raw JSON")
    p_sections.set_defaults(func=cmd_sections)

    # --- config ---
    p_config = sub.add_parser("config", help="Manage user-level defaults (~/.dbtuner/config.yaml)")
    config_sub = p_config.add_subparsers(dest="config_command", help="Config commands")

    p_config_show = config_sub.add_parser("show", help="Show user-level config")
    p_config_show.add_argument("--json", action="store_true", help="Output raw JSON")
    p_config_show.add_argument(
        "--reveal-secrets",
        action="store_true",
        help="Show the stored password unmasked",
    )
    p_config_show.set_defaults(func=cmd_config_show)

    p_config_set = config_sub.add_parser("set", help="Set user-level config values")
    p_config_set.add_argument("--target-db", help="Default database to profile")
    p_config_set.add_argument("--output-dir", help="Default report directory")
    p_config_set.add_argument("--safe-mode", choices=["true", "false"], help="Default Safe Mode")
    p_config_set.add_argument(
        "--export-schema",
        choices=["true", "false"],
        help="Include the schema section set by default",
    )
    p_config_set.add_argument("--db-host", help="SQL Server host")
    p_config_set.add_argument("--db-port", type=int, help="SQL Server port")
    p_config_set.add_argument("--db-user", help="SQL Server login")
    p_config_set.add_argument("--db-password", help="SQL Server password")
    p_config_set.add_argument(
        "--unset-db-password",
        action="store_true",
        help="Remove the stored password",
    )
    p_config_set.add_argument("--json", action="store_true", help="Output raw JSON")
    p_config_set.set_defaults(func=cmd_config_set)

    return parser


def main() -> None:
    """CLI entrypoint."""
    _apply_user_profile_defaults()
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.command == "config" and not getattr(args, "config_command", None):
        parser.parse_args(["config", "--help"])

    args.func(args)


if __name__ == "__main__":
    main()
