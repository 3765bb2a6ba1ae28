"""Rendering of the WiX localization, parameters and source files."""

from pathlib import Path
from typing import Self
from xml.sax.saxutils import escape, quoteattr

from .msi_version import normalize
from .parameter_set import ParameterSet, check_define_name, check_define_value
from .project import Project

PARAMETERS_FILE = "parameters.wxi"
SOURCE_FILE = "source.wxs"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'
WIX_NAMESPACE = "http://schemas.microsoft.com/wix/2006/wi"
WIX_LOCALIZATION_NAMESPACE = "http://schemas.microsoft.com/wix/2006/localization"

# Id of the ComponentGroup harvested from the staged project tree.
PROJECT_COMPONENT_GROUP = "ProjectDir"


def localization_file_name(culture: str) -> str:
    """Return the localization file name for a culture, e.g. "en-us"."""
    return f"localization-{culture}.wxl"


def _define(name: str, value: str) -> str:
    # Entries added to the shared parameters mapping skip the setter checks.
    check_define_name(name)
    check_define_value(name, value)
    return f'<?define {name}="{value}" ?>'


class WixTemplateRenderer:
    """Renders the three WiX input files of a packaging run.

    The ``*_content`` methods are pure and return the document text. The
    ``write_*`` methods render first and only then open the target file, so a
    failed render never truncates a previous file.
    """

    def __init__(
        self: Self,
        project: Project,
        parameters: ParameterSet,
        staging_dir: str | Path,
    ) -> None:
        """Initialize the renderer.

        Args:
            project: Metadata of the project being packaged.
            parameters: Packager configuration.
            staging_dir: Existing directory the files are written to.
        """
        self.project = project
        self.parameters = parameters
        self.staging_dir = Path(staging_dir)

    def localization_content(self: Self) -> str:
        """Render the localization document.

        Returns:
            The .wxl document.
        """
        product_name = escape(self.project.product_name)
        maintainer = escape(self.project.maintainer)
        culture = quoteattr(self.parameters.localization)
        lines = [
            XML_DECLARATION,
            f"<WixLocalization Culture={culture}",
            f'                 xmlns="{WIX_LOCALIZATION_NAMESPACE}">',
            f'  <String Id="ProductName">{product_name}</String>',
            f'  <String Id="ManufacturerName">{maintainer}</String>',
            f'  <String Id="FeatureMainName">{product_name}</String>',
            '  <String Id="DowngradeErrorMessage">A newer version of '
            "[ProductName] is already installed.</String>",
            "</WixLocalization>",
        ]
        return "\n".join(lines) + "\n"

    def parameters_content(self: Self) -> str:
        """Render the preprocessor include with the version and upgrade code.

        Returns:
            The .wxi document.

        Raises:
            MissingRequiredAttribute: If the upgrade code was never set.
            InvalidVersionFormat: If the build version cannot be normalized.
            InvalidValue: If a parameter added to the shared mapping cannot be
                written into a define.
        """
        upgrade_code = self.parameters.upgrade_code
        version = normalize(self.project.build_version, self.project.build_iteration)

        lines = [
            XML_DECLARATION,
            "<Include>",
            f"  {_define('VersionNumber', version.msi_version)}",
            f"  {_define('DisplayVersionNumber', version.display_version)}",
            f"  {_define('UpgradeCode', upgrade_code)}",
        ]
        defines = {
            name: _define(name, value)
            for name, value in self.parameters.parameters.items()
        }
        lines.extend(f"  {defines[name]}" for name in sorted(defines))
        lines.append("</Include>")
        return "\n".join(lines) + "\n"

    def source_content(self: Self) -> str:
        """Render the WiX source declaring the product and its directories.

        Returns:
            The .wxs document.
        """
        name = quoteattr(self.project.name)
        homepage = quoteattr(self.project.homepage)
        lines = [
            XML_DECLARATION,
            f'<?include "{PARAMETERS_FILE}" ?>',
            f'<Wix xmlns="{WIX_NAMESPACE}">',
            '  <Product Id="*"',
            '           Name="!(loc.ProductName)"',
            '           Language="1033"',
            '           Version="$(var.VersionNumber)"',
            '           Manufacturer="!(loc.ManufacturerName)"',
            '           UpgradeCode="$(var.UpgradeCode)">',
            '    <Package InstallerVersion="200" Compressed="yes" '
            'InstallScope="perMachine" />',
            "    <MajorUpgrade "
            'DowngradeErrorMessage="!(loc.DowngradeErrorMessage)" />',
            '    <Media Id="1" Cabinet="Project.cab" EmbedCab="yes" />',
            f'    <Property Id="ARPURLINFOABOUT" Value={homepage} />',
            '    <Property Id="DISPLAYVERSION" '
            'Value="$(var.DisplayVersionNumber)" />',
            '    <Directory Id="TARGETDIR" Name="SourceDir">',
            '      <Directory Id="WINDOWSVOLUME">',
            '        <Directory Id="INSTALLLOCATION" Name="opt">',
            f'          <Directory Id="PROJECTLOCATION" Name={name}>',
            "          </Directory>",
            "        </Directory>",
            "      </Directory>",
            "    </Directory>",
            '    <SetDirectory Id="WINDOWSVOLUME" Value="[WindowsVolume]" />',
            '    <Feature Id="ProjectFeature"',
            '             Title="!(loc.FeatureMainName)"',
            '             Level="1"',
            '             ConfigurableDirectory="PROJECTLOCATION">',
            f'      <ComponentGroupRef Id="{PROJECT_COMPONENT_GROUP}" />',
            "    </Feature>",
            "  </Product>",
            "</Wix>",
        ]
        return "\n".join(lines) + "\n"

    def write_localization_file(self: Self) -> Path:
        """Write the localization file into the staging directory."""
        return self._write(
            localization_file_name(self.parameters.localization),
            self.localization_content(),
        )

    def write_parameters_file(self: Self) -> Path:
        """Write the parameters include into the staging directory."""
        return self._write(PARAMETERS_FILE, self.parameters_content())

    def write_source_file(self: Self) -> Path:
        """Write the WiX source into the staging directory."""
        return self._write(SOURCE_FILE, self.source_content())

    def _write(self: Self, filename: str, content: str) -> Path:
        path = self.staging_dir / filename
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        return path
