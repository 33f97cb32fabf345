"""
Tests for the CLI — install flows against a local mirror, detection,
config and registry commands.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from hayride_installer import __version__
from hayride_installer.main import cli

from tests.archives import RELEASE_TAG


@pytest.fixture
def runner(monkeypatch) -> CliRunner:
    # Keep log records out of the captured output so JSON stays parseable
    monkeypatch.setenv("HAYRIDE_LOG_LEVEL", "CRITICAL")
    return CliRunner()


@pytest.fixture
def env_home(tmp_path: Path, monkeypatch) -> Path:
    """Point HOME at a temp dir and pin the host to Linux x86_64 bash."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("SHELL", "/bin/bash")
    for var in ("PROFILE", "HAYRIDE_DIR", "HAYRIDE_RELEASE_REPO", "HAYRIDE_MODEL_URL",
                "HAYRIDE_LOG_FILE", "HAYRIDE_LOG_FILE_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("hayride_installer.core.config.loader.platform.system", lambda: "Linux")
    monkeypatch.setattr("hayride_installer.core.config.loader.platform.machine", lambda: "x86_64")
    return home


class TestCliBasics:
    def test_version(self, runner: CliRunner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("install", "install-core", "detect", "config", "registry"):
            assert command in result.output


class TestInstallCommand:
    def test_install_offline(self, runner: CliRunner, env_home: Path, mirror: Path):
        (env_home / ".bashrc").write_text("")

        result = runner.invoke(cli, ["install", "--offline", str(mirror)])

        assert result.exit_code == 0, result.output
        assert f"Hayride latest release version: {RELEASE_TAG}" in result.output
        assert "1 skipped" in result.output
        assert "updated with HAYRIDE_HOME and PATH" in result.output
        assert "Hayride installation complete!" in result.output
        assert (env_home / ".hayride" / "registry" / "morphs" / "hayride-core" / "0.0.1" / "server.wasm").is_file()

    def test_install_prints_manual_block(self, runner: CliRunner, env_home: Path, mirror: Path):
        result = runner.invoke(cli, ["install", "--offline", str(mirror)])

        assert result.exit_code == 0, result.output
        assert "Could not detect profile file" in result.output
        assert 'export PATH="$HAYRIDE_HOME/bin:$PATH"' in result.output

    def test_install_json(self, runner: CliRunner, env_home: Path, mirror: Path):
        result = runner.invoke(cli, ["install", "--offline", str(mirror), "--no-profile", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["version"] == RELEASE_TAG
        assert data["profile"]["status"] == "skipped"
        assert data["registrations"]["hayride"]["placed_count"] == 2

    def test_install_core(self, runner: CliRunner, env_home: Path, mirror: Path):
        result = runner.invoke(cli, ["install-core", "--offline", str(mirror), "--no-profile", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["flow"] == "core"
        assert list(data["registrations"]) == ["hayride-core"]
        assert data["model"]["status"] == "skipped"

    def test_install_core_model_from_mirror(
        self, runner: CliRunner, env_home: Path, mirror: Path, tmp_path: Path,
    ):
        model = tmp_path / "tiny.gguf"
        model.write_bytes(b"weights")

        result = runner.invoke(cli, [
            "install-core", "--offline", str(mirror), "--no-profile",
            "--model-url", str(model),
        ])

        assert result.exit_code == 0, result.output
        assert (env_home / ".hayride" / "ai" / "models" / "tiny.gguf").read_bytes() == b"weights"
        assert "(downloaded)" in result.output

    def test_unsupported_platform_exits_1(self, runner: CliRunner, env_home: Path, mirror: Path, monkeypatch):
        monkeypatch.setattr("hayride_installer.core.config.loader.platform.system", lambda: "Windows")

        result = runner.invoke(cli, ["install", "--offline", str(mirror)])

        assert result.exit_code == 1
        assert "Unsupported OS 'windows'" in result.output

    def test_failure_json(self, runner: CliRunner, env_home: Path, tmp_path: Path):
        empty_mirror = tmp_path / "empty"
        empty_mirror.mkdir()

        result = runner.invoke(cli, ["install", "--offline", str(empty_mirror), "--json"])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert "latest release" in data["error"]


class TestDetectCommand:
    def test_detect_json(self, runner: CliRunner, env_home: Path):
        (env_home / ".bashrc").write_text("")

        result = runner.invoke(cli, ["detect", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["platform"] == {"arch": "x86_64", "os": "linux-gnu"}
        assert data["archive"] == "hayride-<version>-x86_64-linux-gnu.tar.xz"
        assert data["profile"] == str(env_home / ".bashrc")
        assert set(data["registries"]) == {"hayride", "hayride-core"}

    def test_detect_human(self, runner: CliRunner, env_home: Path):
        result = runner.invoke(cli, ["detect"])
        assert result.exit_code == 0
        assert "linux-gnu" in result.output
        assert "not detected" in result.output

    def test_detect_unsupported(self, runner: CliRunner, env_home: Path, monkeypatch):
        monkeypatch.setattr("hayride_installer.core.config.loader.platform.system", lambda: "FreeBSD")
        result = runner.invoke(cli, ["detect"])
        assert result.exit_code == 1
        assert "Unsupported OS" in result.output


class TestConfigCommands:
    def test_show(self, runner: CliRunner):
        result = runner.invoke(cli, ["config", "show", "--release", "v1.2.3"])
        assert result.exit_code == 0
        assert result.output.startswith("version: v1.2.3\n")

    def test_check_after_install(self, runner: CliRunner, env_home: Path, mirror: Path):
        runner.invoke(cli, ["install", "--offline", str(mirror), "--no-profile"])

        result = runner.invoke(cli, ["config", "check", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["version"] == RELEASE_TAG
        assert "hayride-core:server@0.0.1" in data["morphs"]

    def test_check_missing(self, runner: CliRunner, env_home: Path):
        result = runner.invoke(cli, ["config", "check"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_check_explicit_file(self, runner: CliRunner, tmp_path: Path):
        bad = tmp_path / "c.yaml"
        bad.write_text("- nope\n")

        result = runner.invoke(cli, ["config", "check", "--file", str(bad), "--json"])

        assert result.exit_code == 1
        assert json.loads(result.output)["valid"] is False

    def test_check_non_utf8_file(self, runner: CliRunner, tmp_path: Path):
        bad = tmp_path / "c.yaml"
        bad.write_bytes(b"version: \xff\n")

        result = runner.invoke(cli, ["config", "check", "--file", str(bad)])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Configuration errors" in result.output


class TestRegistryCommands:
    def test_register(self, runner: CliRunner, tmp_path: Path):
        src = tmp_path / "build"
        src.mkdir()
        (src / "llama-0.0.2.wasm").write_bytes(b"l")
        (src / "notes.wasm.md").write_text("x")
        root = tmp_path / "registry"

        result = runner.invoke(cli, ["registry", "register", str(src), str(root)])

        assert result.exit_code == 0, result.output
        assert "llama@0.0.2" in result.output
        assert "Skipped 1" in result.output
        assert (root / "0.0.2" / "llama.wasm").read_bytes() == b"l"

    def test_register_missing_source(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, [
            "registry", "register", str(tmp_path / "nope"), str(tmp_path / "r"), "--json",
        ])
        assert result.exit_code == 1
        assert "does not exist" in json.loads(result.output)["error"]

    def test_register_custom_extension(self, runner: CliRunner, tmp_path: Path):
        src = tmp_path / "build"
        src.mkdir()
        (src / "feature-1.0.0.wac").write_bytes(b"c")

        result = runner.invoke(cli, [
            "registry", "register", str(src), str(tmp_path / "r"), "--ext", ".wac", "--json",
        ])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["placed"][0]["name"] == "feature"

    def test_list(self, runner: CliRunner, env_home: Path, mirror: Path):
        runner.invoke(cli, ["install", "--offline", str(mirror), "--no-profile"])

        result = runner.invoke(cli, ["registry", "list", "--namespace", "hayride", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert list(data) == ["hayride"]
        assert sorted(e["name"] for e in data["hayride"]) == ["ai-server", "llama"]

    def test_list_empty(self, runner: CliRunner, env_home: Path):
        result = runner.invoke(cli, ["registry", "list"])
        assert result.exit_code == 0
        assert "(empty)" in result.output
