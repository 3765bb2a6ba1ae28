"""MSI packager orchestrating rendering, compiling, linking and signing."""

import logging
import shutil
from pathlib import Path
from typing import Self

from .msi_version import normalize
from .package_name import build_package_name
from .parameter_set import ParameterSet
from .project import Project
from .toolchain import WixToolchain
from .wix_templates import WixTemplateRenderer

logger = logging.getLogger(__name__)


class MsiPackager:
    """Builds an MSI package for a project from its staging directory.

    Derived values (versions, package name) are recomputed on every access, so
    changes to the project or parameters are always picked up.

    Example:
        >>> project = Project(
        ...     name="project",
        ...     homepage="https://example.com",
        ...     maintainer="Chef Software",
        ...     install_dir="C:/project",
        ...     build_version="1.2.3",
        ...     build_iteration=2,
        ... )
        >>> packager = MsiPackager(project, "staging", "pkg")
        >>> packager.parameters.set_upgrade_code("ABCD-1234")
        >>> packager.package_name
        'project-1.2.3-2.msi'
    """

    id = "msi"

    def __init__(
        self: Self,
        project: Project,
        staging_dir: str | Path,
        package_dir: str | Path,
        parameters: ParameterSet | None = None,
        toolchain: WixToolchain | None = None,
    ) -> None:
        """Initialize the packager.

        Args:
            project: Metadata of the project being packaged.
            staging_dir: Existing, writable directory for intermediate files.
            package_dir: Directory the finished package is copied to.
            parameters: Packager configuration. A fresh one is created if None.
            toolchain: External tool runner. Defaults to the WiX tools on PATH.
        """
        self.project = project
        self.staging_dir = staging_dir
        self.package_dir = package_dir
        self.parameters = parameters or ParameterSet()
        self.toolchain = toolchain or WixToolchain()

    @property
    def staging_dir(self: Self) -> Path:
        """Absolute staging directory.

        Relative paths are resolved against the working directory when set. The
        WiX tools run with this directory as their working directory.
        """
        return self._staging_dir

    @staging_dir.setter
    def staging_dir(self: Self, value: str | Path) -> None:
        self._staging_dir = Path(value).absolute()

    @property
    def package_dir(self: Self) -> Path:
        """Absolute directory the finished package is copied to."""
        return self._package_dir

    @package_dir.setter
    def package_dir(self: Self, value: str | Path) -> None:
        self._package_dir = Path(value).absolute()

    @property
    def renderer(self: Self) -> WixTemplateRenderer:
        """Renderer bound to the current project, parameters and staging dir."""
        return WixTemplateRenderer(self.project, self.parameters, self.staging_dir)

    @property
    def resources_dir(self: Self) -> Path:
        """Directory holding installer resources inside the staging directory."""
        return self.staging_dir / "Resources"

    @property
    def msi_version(self: Self) -> str:
        """The four field MSI version, e.g. "1.2.3.2"."""
        return normalize(
            self.project.build_version, self.project.build_iteration
        ).msi_version

    @property
    def msi_display_version(self: Self) -> str:
        """The "major.minor.patch" version shown to users."""
        return normalize(
            self.project.build_version, self.project.build_iteration
        ).display_version

    @property
    def package_name(self: Self) -> str:
        """File name of the finished package."""
        return build_package_name(
            self.project.name, self.msi_display_version, self.project.build_iteration
        )

    def write_localization_file(self: Self) -> Path:
        """Write the localization file. See ``WixTemplateRenderer``."""
        path = self.renderer.write_localization_file()
        logger.debug("Wrote %s", path)
        return path

    def write_parameters_file(self: Self) -> Path:
        """Write the parameters include. See ``WixTemplateRenderer``."""
        path = self.renderer.write_parameters_file()
        logger.debug("Wrote %s", path)
        return path

    def write_source_file(self: Self) -> Path:
        """Write the WiX source. See ``WixTemplateRenderer``."""
        path = self.renderer.write_source_file()
        logger.debug("Wrote %s", path)
        return path

    def render(self: Self) -> tuple[Path, Path, Path]:
        """Write all three WiX input files.

        Returns:
            Paths of the localization, parameters and source files.
        """
        return (
            self.write_localization_file(),
            self.write_parameters_file(),
            self.write_source_file(),
        )

    def run(self: Self) -> Path:
        """Build the package.

        Renders the WiX inputs, compiles and links them, signs the result when a
        signing identity is configured and copies it into the package
        directory. The first failure aborts the run; files already written stay
        in the staging directory.

        Returns:
            Path of the package in the package directory.

        Raises:
            MissingRequiredAttribute: If the upgrade code was never set.
            InvalidVersionFormat: If the build version is not usable.
            ToolchainError: If an external tool fails.
            OSError: If a file cannot be written or copied.
        """
        localization, _, source = self.render()

        wixobj = self.staging_dir / "source.wixobj"
        self.toolchain.compile(
            source,
            wixobj,
            extensions=self.parameters.wix_candle_extensions,
            cwd=self.staging_dir,
        )

        msi = self.staging_dir / self.package_name
        self.toolchain.link(
            wixobj,
            localization,
            msi,
            culture=self.parameters.localization,
            extensions=self.parameters.wix_light_extensions,
            delay_validation=self.parameters.delay_validation,
            cwd=self.staging_dir,
        )

        identity = self.parameters.signing_identity
        if identity is not None:
            self.toolchain.sign(msi, identity)

        self.package_dir.mkdir(parents=True, exist_ok=True)
        destination = Path(shutil.copy2(msi, self.package_dir / msi.name))
        logger.info("Created package %s", destination)
        return destination
