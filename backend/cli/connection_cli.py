#!/usr/bin/env python3
"""Connection CLI for checking a pgCompare repository from the terminal.

This CLI runs the same pre-flight check as the dashboard login:
- Probe the repository database with the given credentials
- Optionally list the projects found in the repository schema

The password is read from the PGPASSWORD environment variable, or
prompted for when it is not set.

Usage:
    python -m cli.connection_cli --host localhost --database pgcompare --user postgres
    python -m cli.connection_cli ... --schema pgcompare --projects
    python -m cli.connection_cli ... --json
"""
from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import os
import sys
from typing import Any

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import DEFAULT_SCHEMA, settings
from app.models.project import DcProject
from db.credentials import Credentials
from db.errors import DatabaseSessionError, driver_message
from db.session_manager import ConnectionSessionManager


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RESET = ""
        cls.BOLD = ""
        cls.RED = ""
        cls.GREEN = ""


class ConnectionCLI:
    """Terminal front end for the connection session manager."""

    def __init__(
        self,
        manager: ConnectionSessionManager,
        json_output: bool = False,
        no_color: bool = False,
    ):
        """Initialize the CLI.

        Args:
            manager: Session manager used for the probe
            json_output: Output in JSON format
            no_color: Disable colored output
        """
        self.manager = manager
        self.json_output = json_output
        if no_color or not sys.stdout.isatty():
            Colors.disable()

    async def check(self, credentials: Credentials, list_projects: bool = False) -> int:
        """Probe the repository and report the outcome.

        Args:
            credentials: Repository credentials
            list_projects: Also list the projects in the repository

        Returns:
            Exit code
        """
        data: dict[str, Any] = {
            "connection": credentials.masked_connection_string,
            "schema": credentials.schema_name,
        }

        try:
            await self.manager.test_connection(credentials)
            if list_projects:
                await self.manager.initialize(credentials)
                data["projects"] = await self._fetch_projects()
        except DatabaseSessionError as e:
            data.update({"success": False, "error": str(e)})
            self._output(data)
            return 1
        except SQLAlchemyError as e:
            data.update({"success": False, "error": driver_message(e)})
            self._output(data)
            return 1
        finally:
            await self.manager.close()

        data["success"] = True
        self._output(data)
        return 0

    async def _fetch_projects(self) -> list[dict[str, Any]]:
        async with self.manager.session() as session:
            result = await session.execute(select(DcProject).order_by(DcProject.project_name))
            return [
                {"pid": p.pid, "project_name": p.project_name}
                for p in result.scalars().all()
            ]

    def _output(self, data: dict[str, Any]) -> None:
        if self.json_output:
            print(json.dumps(data, indent=2, default=str))
            return

        print(f"{Colors.BOLD}{data['connection']}{Colors.RESET}")
        if data.get("success"):
            print(f"{Colors.GREEN}OK{Colors.RESET} connection succeeded")
        else:
            print(f"{Colors.RED}FAILED{Colors.RESET} {data.get('error')}", file=sys.stderr)

        for project in data.get("projects", []):
            print(f"  {project['pid']:>6}  {project['project_name']}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the connection CLI."""
    parser = argparse.ArgumentParser(
        prog="pgcompare-connection",
        description="Check a pgCompare repository connection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pgcompare-connection --host db --database pgc --user admin
  pgcompare-connection --host db --database pgc --user admin --projects
  PGPASSWORD=secret pgcompare-connection --host db --database pgc --user admin --json

Exit Codes:
  0 = Success
  1 = Connection failed
  2 = Invalid arguments
        """,
    )

    parser.add_argument("--host", default="localhost", help="Database host (default: localhost)")
    parser.add_argument("--port", type=int, default=5432, help="Database port (default: 5432)")
    parser.add_argument("--database", required=True, help="Database name")
    parser.add_argument(
        "--schema",
        default=DEFAULT_SCHEMA,
        help=f"Repository schema (default: {DEFAULT_SCHEMA})",
    )
    parser.add_argument("--user", required=True, help="Database user")

    parser.add_argument(
        "--projects",
        action="store_true",
        help="List projects found in the repository",
    )

    # Output options
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    return parser


def read_password() -> str:
    """Read the password from PGPASSWORD or prompt for it."""
    password = os.environ.get("PGPASSWORD")
    if password is None:
        password = getpass.getpass("Password: ")
    return password


async def main_async(args: argparse.Namespace, manager: ConnectionSessionManager | None = None) -> int:
    """Main async entry point.

    Args:
        args: Parsed arguments
        manager: Session manager to use (a fresh one by default)

    Returns:
        Exit code
    """
    try:
        credentials = Credentials(
            host=args.host,
            port=args.port,
            database=args.database,
            schema=args.schema,
            user=args.user,
            password=read_password(),
        )
    except ValidationError as e:
        print(f"Invalid connection details: {e}", file=sys.stderr)
        return 2

    cli = ConnectionCLI(
        manager or ConnectionSessionManager(settings=settings),
        json_output=args.json,
        no_color=args.no_color,
    )
    return await cli.check(credentials, list_projects=args.projects)


def main() -> None:
    """Main entry point for the connection CLI."""
    args = build_parser().parse_args()

    try:
        exit_code = asyncio.run(main_async(args))
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()
