"""
CLI entry point for exprguard.

This module provides the Typer-based command-line interface used to inspect
and audit an access policy outside of a running evaluator.

Commands:
    check-type      Decide whether a type name may be referenced
    check-member    Decide whether a member of a type may be accessed
    blocked         List blocked namespaces
    allowed         List types and namespaces re-admitted by the policy
    validate        Validate a YAML policy file

Every command uses the built-in policy unless --policy (or the
EXPRGUARD_POLICY environment variable) points at a YAML file.

Exit codes:
    0   allowed / valid
    1   denied
    2   invalid input or policy
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from exprguard import __version__
from exprguard.errors import ExprGuardError
from exprguard.policy import PolicyEngine, PolicyStore
from exprguard.policy.introspect import qualified_name, resolve_type
from exprguard.schema import PolicyConfig, load_policy

EXIT_ALLOWED = 0
EXIT_DENIED = 1
EXIT_ERROR = 2

# Initialize Typer app with metadata
app = typer.Typer(
    name="exprguard",
    help="Inspect the access policy for template expressions.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()

PolicyOption = Annotated[
    Optional[Path],
    typer.Option(
        "--policy",
        "-p",
        help="Path to a policy YAML file. Defaults to the built-in policy.",
        envvar="EXPRGUARD_POLICY",
    ),
]

JsonOption = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Output results in JSON format.",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]exprguard[/bold] version {__version__}")
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
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Log policy loading and resolution details.",
        ),
    ] = False,
) -> None:
    """
    exprguard - Access policy for template expressions.

    Decide which types an expression may name and which members it may
    access, and list the tables behind those decisions.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command("check-type")
def check_type(
    type_name: Annotated[str, typer.Argument(help="Fully-qualified type name, e.g. subprocess.Popen.")],
    policy_path: PolicyOption = None,
    json_output: JsonOption = False,
) -> None:
    """
    Decide whether an expression may reference a type by name.

    Example:
        $ exprguard check-type subprocess.Popen
    """
    engine = _load_engine(policy_path, json_output)
    try:
        allowed = engine.is_type_reference_allowed(type_name)
    except ExprGuardError as e:
        _fail(e, json_output)

    if json_output:
        _print_json({"type": type_name, "allowed": allowed})
    else:
        console.print(f"{_verdict(allowed)} type reference [cyan]{escape(type_name)}[/cyan]")
    raise typer.Exit(code=EXIT_ALLOWED if allowed else EXIT_DENIED)


@app.command("check-member")
def check_member(
    type_name: Annotated[str, typer.Argument(help="Fully-qualified name of the target type.")],
    member: Annotated[str, typer.Argument(help="Member name, e.g. get or __globals__.")],
    static: Annotated[
        bool,
        typer.Option(
            "--static",
            help="Check access on the class itself instead of on an instance.",
        ),
    ] = False,
    policy_path: PolicyOption = None,
    json_output: JsonOption = False,
) -> None:
    """
    Decide whether an expression may access a member of a type.

    The type must be importable: instance rules depend on the class itself
    (enum, proxy, supertypes), not only on its name.

    Example:
        $ exprguard check-member subprocess.Popen kill
    """
    engine = _load_engine(policy_path, json_output)
    cls = resolve_type(type_name)
    if cls is None:
        if json_output:
            _print_json({"error": "unresolved_type", "type": type_name})
        else:
            console.print(f"[red]Cannot resolve type: {escape(type_name)}[/red]")
        raise typer.Exit(code=EXIT_ERROR)

    try:
        if static:
            allowed = engine.is_member_access_allowed(cls, member)
        else:
            allowed = engine.is_member_access_allowed_for_type(cls, member)
    except ExprGuardError as e:
        _fail(e, json_output)

    name = qualified_name(cls)
    kind = "static member" if static else "member"
    if json_output:
        _print_json({
            "type": name,
            "member": member,
            "static": static,
            "allowed": allowed,
            "shape": engine.type_shape(cls).value,
        })
    else:
        console.print(f"{_verdict(allowed)} {kind} [cyan]{name}[/cyan].[magenta]{escape(member)}[/magenta]")
    raise typer.Exit(code=EXIT_ALLOWED if allowed else EXIT_DENIED)


@app.command()
def blocked(
    type_reference: Annotated[
        bool,
        typer.Option(
            "--type-reference",
            help="List the namespaces blocked for type references only.",
        ),
    ] = False,
    policy_path: PolicyOption = None,
    json_output: JsonOption = False,
) -> None:
    """
    List blocked namespaces.

    Example:
        $ exprguard blocked --type-reference
    """
    engine = _load_engine(policy_path, json_output)
    if type_reference:
        entries = engine.list_blocked_type_reference_namespaces()
        title = "Blocked for type reference"
    else:
        entries = engine.list_blocked_namespaces()
        title = "Blocked for all purposes"
    _print_entries(title, entries, json_output)


@app.command()
def allowed(
    policy_path: PolicyOption = None,
    json_output: JsonOption = False,
) -> None:
    """
    List the types, supertypes and namespaces allowed inside blocked namespaces.

    Example:
        $ exprguard allowed --json
    """
    engine = _load_engine(policy_path, json_output)
    _print_entries("Allowed", engine.list_allowed_types(), json_output)


@app.command()
def validate(
    policy_path: Annotated[Path, typer.Argument(help="Path to the policy YAML file.")],
    json_output: JsonOption = False,
) -> None:
    """
    Validate a policy YAML file.

    Example:
        $ exprguard validate policy.yaml
    """
    try:
        config = load_policy(policy_path)
    except ExprGuardError as e:
        _fail(e, json_output)

    summary = {
        "valid": True,
        "path": str(policy_path),
        "version": config.version,
        "blocked_namespaces": len(config.blocked_namespaces),
        "allowed_namespaces": len(config.allowed_namespaces),
        "blocked_type_reference_namespaces": len(config.blocked_type_reference_namespaces),
        "allowed_types": len(config.allowed_types),
        "allowed_supertypes": len(config.allowed_supertypes),
    }
    if json_output:
        _print_json(summary)
    else:
        console.print(f"[green]✓[/green] Policy is valid: {policy_path}")
        for key, value in summary.items():
            if key not in ("valid", "path"):
                console.print(f"  [dim]{key}:[/dim] {value}")
    raise typer.Exit(code=EXIT_ALLOWED)


# =============================================================================
# Helpers
# =============================================================================


def _load_engine(policy_path: Path | None, json_output: bool) -> PolicyEngine:
    if policy_path is None:
        return PolicyEngine()
    try:
        config: PolicyConfig = load_policy(policy_path)
    except ExprGuardError as e:
        _fail(e, json_output)
    return PolicyEngine(PolicyStore.from_config(config))


def _fail(error: ExprGuardError, json_output: bool) -> NoReturn:
    if json_output:
        _print_json(error.to_dict())
    else:
        console.print(str(error), style="red", markup=False)
    raise typer.Exit(code=EXIT_ERROR)


def _verdict(allowed: bool) -> str:
    return "[green]✓ ALLOWED[/green]" if allowed else "[red]✗ DENIED[/red]"


def _print_entries(title: str, entries: list[str], json_output: bool) -> None:
    if json_output:
        _print_json(entries)
        return

    table = Table(title=title)
    table.add_column("Entry", style="cyan")
    for entry in entries:
        table.add_row(escape(entry))
    console.print(table)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


if __name__ == "__main__":
    app()
