"""
Hayride installer — CLI entrypoint.

Usage:
    hayride-installer install
    hayride-installer install-core --model-url URL
    hayride-installer detect
    hayride-installer config check
    python -m hayride_installer.main --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from hayride_installer import __version__
from hayride_installer.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="hayride-installer")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """Hayride installer — set up the Hayride platform under ~/.hayride."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug, verbose, quiet, os.environ.get("HAYRIDE_LOG_LEVEL")),
        log_file=os.environ.get("HAYRIDE_LOG_FILE"),
        log_file_level=os.environ.get("HAYRIDE_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


def _release_adapter(settings, offline: Path | None):
    """Local mirror when --offline is given, GitHub otherwise."""
    if offline is not None:
        from hayride_installer.adapters.release.local import LocalReleaseAdapter

        return LocalReleaseAdapter(offline)

    from hayride_installer.adapters.release.github import GitHubReleaseAdapter

    return GitHubReleaseAdapter(api_url=settings.api_url, base_url=settings.release_base_url)


def _fail(message: str, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps({"ok": False, "error": message}, indent=2))
    else:
        click.secho(f"❌ Error: {message}", fg="red")
    sys.exit(1)


def _print_install(result, quiet: bool) -> None:
    """Human-readable install summary."""
    if not quiet:
        click.echo(f"Hayride latest release version: {result.version}")
        if result.platform:
            click.echo(f"   Platform: {result.platform.arch}-{result.platform.os_info}")
        click.echo(f"   Binaries: {result.binaries_extracted} file(s) → {result.hayride_dir / 'bin'}")
        for ns, report in result.registrations.items():
            click.echo(f"   Morphs [{ns}]: {report.placed_count} registered", nl=False)
            if report.skipped:
                click.secho(f", {len(report.skipped)} skipped", fg="yellow", nl=False)
            click.echo()
        if result.flow == "full":
            click.echo(f"   Compositions: {len(result.compositions)}")
        if result.model_status != "skipped":
            click.echo(f"   Model: {result.model_path} ({result.model_status})")
        click.echo()

    profile = result.profile
    if profile is not None:
        if profile.status == "updated":
            click.echo(
                f"profile {profile.profile} updated with HAYRIDE_HOME and PATH, restart your "
                f"shell or run 'source {profile.profile}' to apply changes"
            )
        elif profile.status == "already_present":
            click.echo(f"profile {profile.profile} already contains HAYRIDE_HOME and was not updated")
        else:
            if profile.status == "not_detected":
                click.secho(
                    "⚠️  Could not detect profile file. Please add the following "
                    "to your shell profile manually:",
                    fg="yellow",
                )
            else:
                click.echo("Shell profile left untouched. To use hayride, add:")
            click.echo(profile.block)

    click.secho("✅ Hayride installation complete!", fg="green", bold=True)


def _run_install(ctx: click.Context, flow: str, offline: Path | None,
                 no_profile: bool, as_json: bool, model_url: str | None = None) -> None:
    from hayride_installer.adapters.archive.tar import TarArchiveAdapter
    from hayride_installer.core.config.loader import load_settings
    from hayride_installer.core.errors import InstallerError
    from hayride_installer.core.use_cases.install import install_core, install_full

    try:
        settings = load_settings(model_url=model_url)
        release = _release_adapter(settings, offline)
        archive = TarArchiveAdapter()
        if flow == "full":
            result = install_full(settings, release, archive, update_profile=not no_profile)
        else:
            result = install_core(
                settings, release, archive,
                model_url=model_url,
                update_profile=not no_profile,
            )
    except InstallerError as e:
        _fail(str(e), as_json)
        return

    if as_json:
        click.echo(json.dumps({"ok": True, **result.to_dict()}, indent=2))
        return

    _print_install(result, ctx.obj.get("quiet", False))


_offline_option = click.option(
    "--offline",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Install from a local release mirror instead of GitHub.",
)
_no_profile_option = click.option(
    "--no-profile", is_flag=True, help="Don't modify the shell profile.",
)
_json_option = click.option(
    "--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.",
)


@cli.command()
@_offline_option
@_no_profile_option
@_json_option
@click.pass_context
def install(ctx: click.Context, offline: Path | None, no_profile: bool, as_json: bool) -> None:
    """Install the latest release: binaries, morphs and compositions.

    Examples:

        hayride-installer install

        hayride-installer install --offline /mnt/hayride-mirror
    """
    _run_install(ctx, "full", offline, no_profile, as_json)


@cli.command("install-core")
@click.option("--model-url", default=None, help="Model artifact to download (or HAYRIDE_MODEL_URL).")
@_offline_option
@_no_profile_option
@_json_option
@click.pass_context
def install_core_cmd(
    ctx: click.Context,
    model_url: str | None,
    offline: Path | None,
    no_profile: bool,
    as_json: bool,
) -> None:
    """Install binaries and core morphs only, optionally with a model."""
    _run_install(ctx, "core", offline, no_profile, as_json, model_url=model_url)


@cli.command()
@_json_option
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show what the installer detects about this host."""
    from hayride_installer.core.config.loader import load_settings
    from hayride_installer.core.errors import InstallerError
    from hayride_installer.core.services.platform_detect import detect_platform
    from hayride_installer.core.services.shell_profile import detect_profile

    try:
        settings = load_settings()
    except InstallerError as e:
        _fail(str(e), as_json)
        return

    platform_error = None
    try:
        info = detect_platform(settings.system, settings.machine)
    except InstallerError as e:
        info = None
        platform_error = str(e)

    profile = detect_profile(
        settings.shell_name, settings.system, settings.home_dir, settings.profile,
    )

    data = {
        "hayride_dir": str(settings.hayride_dir),
        "system": settings.system,
        "machine": settings.machine,
        "platform": info.to_dict() if info else None,
        "platform_error": platform_error,
        "archive": info.archive_name("<version>") if info else None,
        "shell": settings.shell_name,
        "profile": str(profile) if profile else None,
        "registries": {ns: str(p) for ns, p in settings.registry_roots.items()},
    }

    if as_json:
        click.echo(json.dumps(data, indent=2))
        sys.exit(0 if info else 1)

    click.secho("\n🔍 Hayride install detection", fg="cyan", bold=True)
    click.echo(f"   Install root: {data['hayride_dir']}")
    if info:
        click.echo(f"   Platform:     {info.arch} / {info.os_info}")
        click.echo(f"   Archive:      {data['archive']}")
    else:
        click.secho(f"   Platform:     ✗ {platform_error}", fg="red")
    click.echo(f"   Shell:        {data['shell'] or '?'}")
    if profile:
        click.echo(f"   Profile:      {profile}")
    else:
        click.secho("   Profile:      not detected (manual setup needed)", fg="yellow")
    for ns, path in data["registries"].items():
        click.echo(f"   Registry:     {ns} → {path}")
    click.echo()

    if info is None:
        sys.exit(1)


@cli.group()
def config() -> None:
    """Platform configuration commands."""


@config.command("check")
@click.option(
    "--file", "config_file",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file to check (default: ~/.hayride/config.yaml).",
)
@_json_option
def config_check(config_file: Path | None, as_json: bool) -> None:
    """Validate the platform config.yaml."""
    from hayride_installer.core.config.loader import load_settings
    from hayride_installer.core.config.platform_config import load_platform_config
    from hayride_installer.core.errors import ConfigError

    try:
        path = config_file or load_settings().config_file
        platform_config = load_platform_config(path)
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "errors": [str(e)]}, indent=2))
        else:
            click.secho("❌ Configuration errors:", fg="red", bold=True)
            click.echo(f"   • {e}")
        sys.exit(1)

    refs = platform_config.morph_references()
    if as_json:
        click.echo(json.dumps({
            "valid": True,
            "config_file": str(path),
            "version": platform_config.version,
            "morphs": refs,
        }, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   File:    {path}")
    click.echo(f"   Version: {platform_config.version}")
    click.echo(f"   Morphs:  {len(refs)}")
    for ref in refs:
        click.echo(f"     • {ref}")


@config.command("show")
@click.option("--release", "release_version", default="<version>", help="Release tag to substitute.")
def config_show(release_version: str) -> None:
    """Print the default config.yaml the installer writes."""
    from hayride_installer.core.config.platform_config import render_platform_config

    click.echo(render_platform_config(release_version), nl=False)


# ── Register sub-command groups from hayride_installer/ui/cli/ ──

from hayride_installer.ui.cli.registry import registry  # noqa: E402

cli.add_command(registry)


if __name__ == "__main__":
    cli()
