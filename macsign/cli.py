"""macsign CLI application with Typer."""

import logging
import os
from pathlib import Path
from typing import Annotated

import click
import typer

from macsign import __version__
from macsign.bootstrap import bootstrap_application
from macsign.config import LOG_LEVELS, get_settings, set_settings
from macsign.targets import SignFailure, SignSuccess
from macsign.utils.cli_output import json_response

app = typer.Typer(
    name="macsign",
    help="Code-sign macOS apps, installer packages and disk images with a keychain identity",
    add_completion=True,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"macsign version {__version__}")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Route macsign log records to stderr at ``level``."""

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("macsign").setLevel(level)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
    codesign: Annotated[
        Path | None,
        typer.Option("--codesign", help="Override the codesign executable"),
    ] = None,
    keychain: Annotated[
        Path | None,
        typer.Option("--keychain", help="Only list identities from this keychain"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log diagnostic detail to stderr"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Logging level for macsign diagnostics",
            click_type=click.Choice(LOG_LEVELS, case_sensitive=False),
        ),
    ] = None,
) -> None:
    """macsign - sign .app, .pkg and .dmg files with codesign."""
    # Update settings with CLI flags
    settings = get_settings()
    updates: dict[str, object] = {}
    if codesign:
        updates["codesign_path"] = codesign
    if keychain:
        updates["keychain"] = keychain
    if log_level:
        updates["log_level"] = log_level.upper()
    if verbose:
        updates["log_level"] = "DEBUG"
    if updates:
        settings = settings.model_copy(update=updates)
    set_settings(settings)
    configure_logging(settings.log_level)


@app.command("identities")
def identities(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output identities as JSON"),
    ] = False,
) -> None:
    """List code-signing identities available in the keychain."""

    container = bootstrap_application()
    labels = container.identity_lister.list_signing_identities()

    if json_output:
        typer.echo(json_response("identities", 1, identities=labels))
        return

    if not labels:
        typer.secho("No signing identities found in keychain.", fg=typer.colors.YELLOW)
        return

    for label in labels:
        typer.echo(label)


@app.command("sign")
def sign(
    path: Annotated[
        Path,
        typer.Argument(
            help="Application bundle (.app), installer package (.pkg) or disk image (.dmg)",
            exists=True,
            resolve_path=True,
        ),
    ],
    identity: Annotated[
        str,
        typer.Option("--identity", "-s", help="Signing identity label as listed by `identities`"),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output the outcome as JSON"),
    ] = False,
) -> None:
    """Sign a file with a keychain identity.

    Example:
        macsign sign MyApp.app -s "Developer ID Application: Example (TEAMID)"
    """

    container = bootstrap_application()

    with container.create_session() as session:
        available = session.load_identities()
        if available and identity not in available:
            typer.secho(
                f"Unknown signing identity: {identity}. Run `macsign identities` to list them.",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=2)

        target = session.select_file(path)
        session.select_identity(identity)
        outcome = session.sign().result()
        message = session.last_status_message or ""

    if json_output:
        typer.echo(
            json_response(
                "sign_outcome",
                1,
                path=str(target.path),
                category=target.category.value,
                identity=identity,
                succeeded=outcome.succeeded,
                reason=outcome.reason if isinstance(outcome, SignFailure) else None,
                message=message,
            )
        )
    elif isinstance(outcome, SignSuccess):
        typer.secho(message, fg=typer.colors.GREEN)
    else:
        typer.secho(message, fg=typer.colors.RED, err=True)

    if isinstance(outcome, SignFailure):
        raise typer.Exit(code=1)


@app.command("doctor")
def doctor(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """Check that the signing tools are present and identities are visible."""

    settings = get_settings()
    checks: list[dict[str, str | bool]] = []
    all_passed = True

    def add_check(name: str, passed: bool, message: str, suggestion: str = "") -> None:
        nonlocal all_passed
        if not passed:
            all_passed = False
        checks.append({
            "name": name,
            "passed": passed,
            "message": message,
            "suggestion": suggestion,
        })

    for name, tool in (("codesign", settings.codesign_path), ("security", settings.security_path)):
        usable = tool.is_file() and os.access(tool, os.X_OK)
        add_check(
            f"{name}_tool",
            usable,
            f"{name}: {tool}" + ("" if usable else " (not found)"),
            "Install the Xcode command line tools: xcode-select --install" if not usable else "",
        )

    container = bootstrap_application(settings)
    labels = container.identity_lister.list_signing_identities()
    add_check(
        "signing_identities",
        bool(labels),
        f"Signing identities: {len(labels)} found",
        "Import a code-signing certificate into your keychain" if not labels else "",
    )

    if json_output:
        typer.echo(json_response("doctor_report", 1, all_passed=all_passed, checks=checks))
        if not all_passed:
            raise typer.Exit(code=1)
        return

    typer.echo()
    typer.secho("macsign doctor", fg=typer.colors.CYAN, bold=True)
    typer.secho("=" * 40, fg=typer.colors.CYAN)
    typer.echo()

    for check in checks:
        icon = "✓" if check["passed"] else "✗"
        color = typer.colors.GREEN if check["passed"] else typer.colors.RED
        typer.secho(f"  {icon} {check['message']}", fg=color)
        if check.get("suggestion") and not check["passed"]:
            typer.secho(f"    → {check['suggestion']}", fg=typer.colors.YELLOW)

    typer.echo()
    if all_passed:
        typer.secho("All checks passed! ✓", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho("Some checks failed. See suggestions above.", fg=typer.colors.RED)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
