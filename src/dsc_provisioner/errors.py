"""
Errors raised by the DSC provisioner and the message catalog used to
render them, along with the soft validation messages.
"""

from .constants import ErrorKeys

MESSAGES = {
    ErrorKeys.MODULE_PATH_MISSING: "Path to DSC Modules does not exist: {path}",
    ErrorKeys.MANIFESTS_PATH_MISSING: "Path to DSC Manifests folder does not exist: {path}",
    ErrorKeys.MANIFEST_MISSING: "Path to DSC Manifest does not exist: {manifest}",
    ErrorKeys.CONFIGURATION_DATA_MISSING: "Path to DSC Configuration Data file does not exist: {path}",
    ErrorKeys.MANIFEST_AND_MOF_PROVIDED: (
        "You cannot specify both a 'configuration_file' and a 'mof_path' "
        "for the DSC provisioner. Please choose one."
    ),
    ErrorKeys.UNKNOWN_OPTION: "Unknown DSC provisioner option: {option}",
    ErrorKeys.INVALID_OPTION: "Invalid value for DSC provisioner option {option}: expected {expected}, got {actual!r}",
    ErrorKeys.INVALID_DEFINITION: "Invalid machine definition {path}: {reason}",
}


def render_message(key: str, **kwargs) -> str:
    """
    Render a catalog message.

    Args:
        key: Message key from ErrorKeys
        **kwargs: Values interpolated into the template

    Returns:
        str: The rendered message

    Raises:
        KeyError: If the key is not in the catalog
    """
    return MESSAGES[key].format(**kwargs)


class DSCError(Exception):
    """Base exception for all DSC provisioner errors."""

    def __init__(self, error_key: str, **kwargs):
        self.error_key = error_key
        self.details = kwargs
        super().__init__(render_message(error_key, **kwargs))


class ConfigError(DSCError):
    """Raised when a provisioner configuration is invalid."""

    pass


class DefinitionError(DSCError):
    """Raised when a machine definition file cannot be loaded."""

    def __init__(self, path, reason: str):
        super().__init__(ErrorKeys.INVALID_DEFINITION, path=path, reason=reason)
