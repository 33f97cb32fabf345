"""
Platform config — the ``~/.hayride/config.yaml`` the runtime reads.

The installer writes a fixed document, substituting only the release
version, and overwrites whatever was there before. ``load_platform_config``
reads it back through Pydantic so ``hayride-installer config check`` can
tell whether a hand-edited file still parses.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from hayride_installer.core.errors import ConfigError

logger = logging.getLogger(__name__)

# Written verbatim; only {version} is substituted.
_CONFIG_TEMPLATE = """\
version: {version}
license: alpha
core:
  server:
    bin: "hayride-core:server@0.0.1"
    plugs:
      - hayride-core:cfg@0.0.1
    logging:
      enabled: true
      level: debug
      file: "server.wasm.log"
    http:
      port: 8080
  cli:
    bin: "hayride-core:cli@0.0.1"
    logging:
      enabled: true
      level: debug
      file: "cli.wasm.log"
features:
  ai:
    enabled: false
    bin: "hayride-core:ai-server@0.0.1"
    compose:
      file: "feature-ai.wac"
    logging:
        enabled: true
        level: debug
        file: ""
    websocket:
        port: 8081
    http:
        port: 8082
"""


class LoggingSection(BaseModel):
    enabled: bool = True
    level: str = "info"
    file: str = ""


class PortSection(BaseModel):
    port: int


class ServerSection(BaseModel):
    bin: str
    plugs: list[str] = Field(default_factory=list)
    logging: LoggingSection = Field(default_factory=LoggingSection)
    http: PortSection | None = None


class CliSection(BaseModel):
    bin: str
    logging: LoggingSection = Field(default_factory=LoggingSection)


class CoreSection(BaseModel):
    server: ServerSection
    cli: CliSection


class ComposeSection(BaseModel):
    file: str


class AiFeature(BaseModel):
    enabled: bool = False
    bin: str
    compose: ComposeSection | None = None
    logging: LoggingSection = Field(default_factory=LoggingSection)
    websocket: PortSection | None = None
    http: PortSection | None = None


class FeaturesSection(BaseModel):
    ai: AiFeature | None = None


class PlatformConfig(BaseModel):
    """Typed view of config.yaml."""

    version: str
    license: str = ""
    core: CoreSection
    features: FeaturesSection = Field(default_factory=FeaturesSection)

    def morph_references(self) -> list[str]:
        """Every ``namespace:name@version`` the config points at."""
        refs = [self.core.server.bin, *self.core.server.plugs, self.core.cli.bin]
        if self.features.ai is not None:
            refs.append(self.features.ai.bin)
        return refs


def render_platform_config(version: str) -> str:
    """Return the default config document for a release version."""
    return _CONFIG_TEMPLATE.format(version=version)


def write_platform_config(path: Path, version: str) -> Path:
    """Write the default config, replacing any existing file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_platform_config(version), encoding="utf-8")
    logger.info("Wrote platform config for %s to %s", version, path)
    return path


def load_platform_config(path: Path) -> PlatformConfig:
    """Read and validate config.yaml.

    Raises:
        ConfigError: The file is missing, not YAML, or doesn't match the schema.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading platform config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid UTF-8: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # An unquoted version like 0.1 would come back as a float
    if "version" in data and not isinstance(data["version"], str):
        data["version"] = str(data["version"])

    try:
        return PlatformConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid platform configuration in {path}: {e}") from e
