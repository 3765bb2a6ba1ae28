"""msipack - Windows Installer packages from staged application trees.

A package for generating WiX localization, parameters and source files for a
project and driving the WiX compiler and linker to produce an MSI.
"""

from ._version import __version__
from .exceptions import (
    ConfigError,
    InvalidValue,
    InvalidVersionFormat,
    MissingRequiredAttribute,
    PackagerError,
    ToolchainError,
)
from .msi_version import MsiVersion, NormalizedVersion, normalize
from .package_name import build_package_name
from .packager import MsiPackager
from .parameter_set import ParameterSet, SigningIdentity
from .project import Project
from .toolchain import WixToolchain
from .wix_templates import WixTemplateRenderer

__all__ = [
    "ConfigError",
    "InvalidValue",
    "InvalidVersionFormat",
    "MissingRequiredAttribute",
    "MsiPackager",
    "MsiVersion",
    "NormalizedVersion",
    "PackagerError",
    "ParameterSet",
    "Project",
    "SigningIdentity",
    "ToolchainError",
    "WixTemplateRenderer",
    "WixToolchain",
    "__version__",
    "build_package_name",
    "normalize",
]
