"""Project metadata consumed by the MSI packager."""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from .msi_version import MSI_FIELD_LIMIT


class Project(BaseModel):
    """Metadata describing the application being packaged.

    Attributes:
        name: Project name, used for the install directory and package name.
        friendly_name: Optional human readable product name.
        homepage: Project homepage.
        maintainer: Organisation shown as the installer manufacturer.
        install_dir: Directory the project is installed into.
        build_version: Arbitrary upstream version, e.g. "1.2.3-rc.1+git.4.abc".
        build_iteration: Packaging revision of ``build_version``.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    name: str = Field(min_length=1)
    friendly_name: str | None = None
    homepage: str
    maintainer: str
    install_dir: str
    build_version: str = Field(min_length=1)
    build_iteration: int = Field(default=1, ge=0, le=MSI_FIELD_LIMIT)

    @property
    def product_name(self: Self) -> str:
        """Name shown to users, defaulting to the capitalized project name."""
        return self.friendly_name or self.name.capitalize()
