"""
Tests for shell profile integration — PATH block rendering and idempotent append.
"""

from pathlib import Path

import pytest

from hayride_installer.core.services.shell_profile import (
    SENTINEL,
    build_path_block,
    detect_profile,
    integrate_profile,
)


class TestBuildPathBlock:
    def test_posix(self, tmp_path: Path):
        block = build_path_block(tmp_path / ".bashrc", Path("/home/u/.hayride"))
        assert 'export HAYRIDE_HOME="/home/u/.hayride"' in block
        assert 'export PATH="$HAYRIDE_HOME/bin:$PATH"' in block

    def test_fish(self, tmp_path: Path):
        block = build_path_block(tmp_path / "config.fish", Path("/home/u/.hayride"))
        assert 'set -gx HAYRIDE_HOME "/home/u/.hayride"' in block
        assert 'or set -gx PATH "$HAYRIDE_HOME/bin" $PATH' in block
        assert "export" not in block

    def test_no_profile_gets_posix(self):
        assert "export HAYRIDE_HOME" in build_path_block(None, Path("/h/.hayride"))


class TestIntegrateProfile:
    def test_appends_block(self, home: Path):
        bashrc = home / ".bashrc"
        bashrc.write_text("alias ll='ls -l'\n")

        result = integrate_profile("bash", "Linux", home, home / ".hayride")

        assert result.status == "updated"
        assert result.profile == bashrc
        content = bashrc.read_text()
        assert content.startswith("alias ll='ls -l'\n")
        assert content.endswith(result.block)
        assert SENTINEL in content

    def test_second_run_is_noop(self, home: Path):
        bashrc = home / ".bashrc"
        bashrc.write_text("")

        integrate_profile("bash", "Linux", home, home / ".hayride")
        once = bashrc.read_text()
        result = integrate_profile("bash", "Linux", home, home / ".hayride")

        assert result.status == "already_present"
        assert bashrc.read_text() == once

    def test_existing_sentinel_is_respected(self, home: Path):
        zshrc = home / ".zshrc"
        zshrc.write_text('export HAYRIDE_HOME="/opt/hayride"\n')

        result = integrate_profile("zsh", "Darwin", home, home / ".hayride")

        assert result.status == "already_present"
        assert zshrc.read_text() == 'export HAYRIDE_HOME="/opt/hayride"\n'

    def test_creates_fish_config(self, home: Path):
        result = integrate_profile("fish", "Linux", home, home / ".hayride")

        fish = home / ".config" / "fish" / "config.fish"
        assert result.status == "updated"
        assert "set -gx HAYRIDE_HOME" in fish.read_text()

    def test_not_detected(self, home: Path):
        result = integrate_profile("bash", "Linux", home, home / ".hayride")

        assert result.status == "not_detected"
        assert result.profile is None
        assert "export HAYRIDE_HOME" in result.block
        assert list(home.iterdir()) == []

    def test_override_profile(self, home: Path, tmp_path: Path):
        custom = tmp_path / "custom_profile"
        custom.write_text("")

        result = integrate_profile("zsh", "Linux", home, home / ".hayride", custom)

        assert result.profile == custom
        assert SENTINEL in custom.read_text()
        assert not (home / ".zshrc").exists()

    def test_latin1_profile_is_appended(self, home: Path):
        bashrc = home / ".bashrc"
        bashrc.write_bytes(b"# caf\xe9 latin-1\n")

        result = integrate_profile("bash", "Linux", home, home / ".hayride")

        assert result.status == "updated"
        content = bashrc.read_bytes()
        assert content.startswith(b"# caf\xe9 latin-1\n")
        assert SENTINEL.encode() in content

    def test_latin1_profile_with_sentinel(self, home: Path):
        bashrc = home / ".bashrc"
        original = b'# caf\xe9\nexport HAYRIDE_HOME="/opt/hayride"\n'
        bashrc.write_bytes(original)

        result = integrate_profile("bash", "Linux", home, home / ".hayride")

        assert result.status == "already_present"
        assert bashrc.read_bytes() == original


class TestDetectProfile:
    @pytest.mark.parametrize("system,expected", [
        ("Darwin", ".bash_profile"),
        ("Linux", ".bashrc"),
    ])
    def test_bash_order(self, home: Path, system: str, expected: str):
        (home / ".bashrc").write_text("")
        (home / ".bash_profile").write_text("")

        assert detect_profile("bash", system, home) == home / expected

    @pytest.mark.parametrize("system", ["Darwin", "Linux"])
    def test_bash_single_file(self, home: Path, system: str):
        (home / ".bash_profile").write_text("")
        assert detect_profile("bash", system, home) == home / ".bash_profile"

    @pytest.mark.parametrize("system,present,expected", [
        ("Darwin", [".bashrc", ".bash_profile"], ".bash_profile"),
        ("Linux", [".bashrc", ".bash_profile"], ".bashrc"),
        ("Linux", [".zshrc", ".profile"], ".profile"),
        ("Darwin", [".zshrc"], ".zshrc"),
    ])
    def test_unknown_shell_fallback(self, home: Path, system: str, present: list, expected: str):
        for name in present:
            (home / name).write_text("")

        assert detect_profile("tcsh", system, home) == home / expected

    def test_unknown_shell_nothing_found(self, home: Path):
        assert detect_profile("tcsh", "Linux", home) is None

