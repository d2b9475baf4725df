"""
CLI entry point for sanction.

This module provides a Typer-based command-line interface for trying out
grant policies. It builds one Role per scope given on the command line,
checks them as a Permit against the policy's Privilege, and reports each
scope's decision.

Commands:
    check       Check scopes against a grant policy file

Exit codes:
    0   all scopes granted
    1   at least one scope denied
    2   the policy could not be loaded

Example:
    $ sanction check repo:read repo:write --policy grants.yaml
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from sanction import __version__
from sanction.errors import PolicyLoadError
from sanction.logging import configure_logging
from sanction.permit import check_permit
from sanction.policy import PolicyEngine, scope_privilege
from sanction.schema import Approval, Role, ScopeDecision, load_policy

# Initialize Typer app with metadata
app = typer.Typer(
    name="sanction",
    help="Check roles against sanction grant policies.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]sanction[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    sanction - composable authorization decisions.
    """
    pass


@app.command()
def check(
    scopes: Annotated[
        list[str],
        typer.Argument(help="Scopes to check, one role per scope."),
    ],
    policy_path: Annotated[
        Path,
        typer.Option(
            "--policy",
            "-p",
            help="Path to the grant policy YAML file.",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Log rule evaluation to stderr.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results in JSON format.",
        ),
    ] = False,
) -> None:
    """
    Check scopes against a grant policy.

    Every scope must be granted for the check to pass; the first denied
    scope decides the overall result.

    Example:
        $ sanction check repo:read --policy grants.yaml --json
    """
    configure_logging("debug" if verbose else "warning", json_output=json_output)

    try:
        policy = load_policy(policy_path)
    except PolicyLoadError as e:
        if json_output:
            _output_json_error("policy_load_error", e.message)
        else:
            console.print(f"[red]Error loading policy: {e.message}[/red]")
        raise typer.Exit(code=2)

    engine = scope_privilege(policy)
    roles = [Role(**{policy.scope_field: scope}) for scope in scopes]
    approval = asyncio.run(check_permit(roles, engine, scopes))
    decisions = [engine.decide(role) for role in roles]

    if json_output:
        _output_json_result(approval, decisions)
    else:
        _display_result(approval, decisions, engine)

    raise typer.Exit(code=0 if approval.value else 1)


def _display_result(
    approval: Approval,
    decisions: list[ScopeDecision],
    engine: PolicyEngine,
) -> None:
    """Display scope decisions in a formatted way."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Scope", style="cyan")
    table.add_column("Decision", width=8)
    table.add_column("Rule")
    table.add_column("Reason")

    for decision in decisions:
        status = "[green]granted[/green]" if decision.allowed else "[yellow]denied[/yellow]"
        table.add_row(
            decision.scope or "",
            status,
            decision.rule_matched or "",
            decision.reason,
        )

    console.print(table)
    console.print()

    if approval.value:
        console.print("[green]✓[/green] Access [green]granted[/green]")
    else:
        console.print(f"[red]✗[/red] Access [red]denied[/red]: {_cause(approval)}")
    console.print(f"[dim]Scope field: {engine.policy.scope_field}[/dim]")


def _output_json_result(approval: Approval, decisions: list[ScopeDecision]) -> None:
    """Output scope decisions in JSON format."""
    output = {
        "allowed": approval.value,
        "error": None if approval.value else _cause(approval),
        "decisions": [decision.model_dump() for decision in decisions],
    }
    print(json.dumps(output, indent=2, default=str))


def _output_json_error(error_type: str, message: str) -> None:
    """Output an error in JSON format."""
    output = {
        "error": True,
        "error_type": error_type,
        "message": message,
    }
    print(json.dumps(output, indent=2))


def _cause(approval: Approval) -> str:
    error = approval.error
    return getattr(error, "message", None) or str(error)
