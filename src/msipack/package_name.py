"""Final installer file name."""


def build_package_name(
    project_name: str, display_version: str, build_iteration: int
) -> str:
    """Build the installer file name.

    Example:
        >>> build_package_name("project", "1.2.3", 2)
        'project-1.2.3-2.msi'
    """
    return f"{project_name}-{display_version}-{build_iteration}.msi"
