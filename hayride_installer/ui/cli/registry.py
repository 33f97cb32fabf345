"""
CLI commands for the morph registry.

Thin wrappers over ``hayride_installer.core.services.registrar``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


def _load_settings_or_exit():
    from hayride_installer.core.config.loader import ConfigError, load_settings

    try:
        return load_settings()
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.group()
def registry() -> None:
    """Registry — register morphs and list what is installed."""


@registry.command("register")
@click.argument("source_dir", type=click.Path(path_type=Path))
@click.argument("registry_root", type=click.Path(path_type=Path))
@click.option("--ext", "extension", default=".wasm", show_default=True, help="Artifact extension.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def register_cmd(source_dir: Path, registry_root: Path, extension: str, as_json: bool) -> None:
    """Copy versioned morphs from SOURCE_DIR into REGISTRY_ROOT.

    Every NAME-X.Y.Z.wasm found under SOURCE_DIR ends up at
    REGISTRY_ROOT/X.Y.Z/NAME.wasm. Other files are skipped.

    Examples:

        hayride-installer registry register ./build ~/.hayride/registry/morphs/hayride
    """
    from hayride_installer.core.errors import RegistrationError
    from hayride_installer.core.services.registrar import register

    try:
        report = register(source_dir, registry_root, extension=extension)
    except RegistrationError as e:
        if as_json:
            payload = e.report.to_dict() if e.report else {}
            payload["error"] = str(e)
            click.echo(json.dumps(payload, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.secho(
        f"✅ Registered {report.placed_count} morph(s) into {registry_root}",
        fg="green",
        bold=True,
    )
    for entry in report.placed:
        click.echo(f"   • {entry.reference}")
    if report.skipped:
        click.secho(f"   ⚠️  Skipped {len(report.skipped)}:", fg="yellow")
        for name in report.skipped:
            click.echo(f"     • {name}")


@registry.command("list")
@click.option("--namespace", "-n", "namespaces", multiple=True, help="Only these namespaces.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_cmd(namespaces: tuple[str, ...], as_json: bool) -> None:
    """List installed morphs per namespace."""
    from hayride_installer.core.services.registrar import list_registry

    settings = _load_settings_or_exit()
    selected = list(namespaces) or settings.namespaces

    listing = {ns: list_registry(settings.registry_root(ns)) for ns in selected}

    if as_json:
        click.echo(json.dumps(
            {ns: [e.model_dump() for e in entries] for ns, entries in listing.items()},
            indent=2,
        ))
        return

    for ns, entries in listing.items():
        click.secho(f"📦 {ns} ({len(entries)})", fg="cyan", bold=True)
        if not entries:
            click.echo("   (empty)")
        for entry in entries:
            click.echo(f"   {ns}:{entry.reference}")
