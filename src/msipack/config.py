"""Loading of packager configuration from TOML files."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigError, InvalidValue
from .packager import MsiPackager
from .parameter_set import DEFAULT_LOCALIZATION, ParameterSet
from .project import Project
from .toolchain import WixToolchain

CONFIG_FILE = "msipack.toml"
PYPROJECT_FILE = "pyproject.toml"


class SigningSettings(BaseModel):
    """The ``signing`` table."""

    model_config = ConfigDict(extra="forbid")

    thumbprint: str
    store: str | None = None
    algorithm: str | None = None
    machine_store: bool | None = None
    timestamp_servers: list[str] | None = None


class ToolchainSettings(BaseModel):
    """The ``toolchain`` table."""

    model_config = ConfigDict(extra="forbid")

    candle: str = "candle.exe"
    light: str = "light.exe"
    signtool: str = "signtool.exe"


class PackagerSettings(BaseModel):
    """Complete configuration of a packaging run."""

    model_config = ConfigDict(extra="forbid")

    name: str
    friendly_name: str | None = None
    homepage: str
    maintainer: str
    install_dir: str
    build_version: str
    build_iteration: int = 1
    upgrade_code: str | None = None
    staging_dir: Path = Path("staging")
    package_dir: Path = Path("pkg")
    localization: str = DEFAULT_LOCALIZATION
    delay_validation: bool = False
    wix_candle_extensions: list[str] = Field(default_factory=list)
    wix_light_extensions: list[str] = Field(default_factory=list)
    parameters: dict[str, str] = Field(default_factory=dict)
    signing: SigningSettings | None = None
    toolchain: ToolchainSettings = Field(default_factory=ToolchainSettings)


def find_config_file(start: Path | None = None) -> Path:
    """Find the configuration file in a directory.

    ``msipack.toml`` wins over ``pyproject.toml`` when both exist.

    Args:
        start: Directory to look in. Defaults to the current directory.

    Returns:
        Path of the configuration file.

    Raises:
        ConfigError: If neither file exists.
    """
    directory = start or Path.cwd()
    for filename in (CONFIG_FILE, PYPROJECT_FILE):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    raise ConfigError(f"No {CONFIG_FILE} or {PYPROJECT_FILE} found in {directory}")


def _read_section(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    if config_path.name == PYPROJECT_FILE:
        section = data.get("tool", {}).get("msipack")
        where = "[tool.msipack]"
    else:
        section = data.get("msipack")
        where = "[msipack]"

    if not isinstance(section, dict):
        raise ConfigError(f"No {where} section in {config_path}")
    return section


def load_settings(config_path: Path | None = None) -> PackagerSettings:
    """Load and validate packager settings.

    Relative ``staging_dir`` and ``package_dir`` values are resolved against
    the directory of the configuration file.

    Args:
        config_path: Explicit configuration file. Searched for in the current
            directory if None.

    Returns:
        Validated settings.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    path = config_path or find_config_file()
    section = _read_section(path)

    try:
        settings = PackagerSettings.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}") from e

    base = path.parent
    return settings.model_copy(
        update={
            "staging_dir": base / settings.staging_dir,
            "package_dir": base / settings.package_dir,
        }
    )


def build_packager(
    settings: PackagerSettings, toolchain: WixToolchain | None = None
) -> MsiPackager:
    """Create a packager from settings.

    Args:
        settings: Validated settings.
        toolchain: Optional toolchain overriding the configured one.

    Returns:
        A ready to run packager.

    Raises:
        ConfigError: If a value is rejected by the project or parameter set.
    """
    try:
        project = Project(
            name=settings.name,
            friendly_name=settings.friendly_name,
            homepage=settings.homepage,
            maintainer=settings.maintainer,
            install_dir=settings.install_dir,
            build_version=settings.build_version,
            build_iteration=settings.build_iteration,
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid project metadata:\n{e}") from e

    parameters = ParameterSet()
    try:
        if settings.upgrade_code is not None:
            parameters.set_upgrade_code(settings.upgrade_code)
        parameters.set_parameters(settings.parameters)
        parameters.set_localization(settings.localization)
        parameters.set_delay_validation(settings.delay_validation)
        for extension in settings.wix_candle_extensions:
            parameters.add_wix_candle_extension(extension)
        for extension in settings.wix_light_extensions:
            parameters.add_wix_light_extension(extension)
        if settings.signing is not None:
            params = settings.signing.model_dump(
                exclude={"thumbprint"}, exclude_none=True
            )
            parameters.set_signing_identity(settings.signing.thumbprint, **params)
    except InvalidValue as e:
        raise ConfigError(str(e)) from e

    if toolchain is None:
        toolchain = WixToolchain(
            candle=settings.toolchain.candle,
            light=settings.toolchain.light,
            signtool=settings.toolchain.signtool,
        )

    return MsiPackager(
        project,
        settings.staging_dir,
        settings.package_dir,
        parameters=parameters,
        toolchain=toolchain,
    )


def load_packager(
    config_path: Path | None = None, toolchain: WixToolchain | None = None
) -> MsiPackager:
    """Load settings and build a packager in one step.

    Raises:
        ConfigError: If configuration cannot be loaded.
    """
    return build_packager(load_settings(config_path), toolchain)
