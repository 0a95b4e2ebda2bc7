"""``node-secrets`` command line: check a deployment's secrets for a role."""

from __future__ import annotations

import json
import logging
import sys

import click

from ..secrets import (
    FIELD_PATHS,
    REQUIRED_PATHS,
    EnvSource,
    Role,
    SecretsError,
    SecretsValidationError,
    YamlFileSource,
    load_secrets,
    redacted_dump,
    validate,
)
from ..secrets._roles import DA_REQUIRED_ROLES


def _parse_role(value: str) -> Role:
    try:
        return Role.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--role") from None


@click.group("node-secrets")
@click.option("-v", "--verbose", is_flag=True, help="Log loading and validation steps to stderr.")
def secrets_group(verbose: bool) -> None:
    """Node secrets tools."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@secrets_group.command("check")
@click.option("--role", "role_name", required=True, help="Deployment role, e.g. main_node or validator.")
@click.option(
    "--file",
    "files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML secrets file. Repeat to layer files; later files win.",
)
@click.option("--env/--no-env", "use_env", default=False, help="Apply environment overrides last.")
@click.option("--env-prefix", default="", help="Prefix for environment variable names.")
def check_cli(role_name: str, files: tuple[str, ...], use_env: bool, env_prefix: str) -> None:
    """Merge secrets sources and validate them for a role.

    Prints a redacted dump on success, the full issue list otherwise.

    Examples:\n
        node-secrets check --role validator --file secrets.yaml\n
        node-secrets check --role prover --file base.yaml --file local.yaml --env\n
    """
    role = _parse_role(role_name)
    sources: list = [YamlFileSource(path) for path in files]
    if use_env:
        sources.append(EnvSource(prefix=env_prefix))

    try:
        view = validate(load_secrets(sources), role)
    except SecretsValidationError as e:
        click.secho(f"Secrets are invalid for role '{role.value}':", fg="red", err=True)
        for issue in e.report.issues:
            click.echo(f"  [{issue.kind.value}] {issue.path}: {issue.reason}", err=True)
        sys.exit(1)
    except SecretsError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(json.dumps(redacted_dump(view), indent=2, sort_keys=True))


@secrets_group.command("paths")
@click.option("--role", "role_name", default=None, help="Mark which paths this role requires.")
def paths_cli(role_name: str | None) -> None:
    """List every known secrets field path."""
    role = _parse_role(role_name) if role_name else None
    required = REQUIRED_PATHS[role] if role else frozenset()
    for path in FIELD_PATHS:
        if role is None:
            click.echo(path)
        else:
            click.echo(f"{path}\t{'required' if path in required else 'optional'}")
    if role in DA_REQUIRED_ROLES:
        click.echo("da.*\tone backend required")
