"""
Shared constants for the DSC provisioner.
"""

class AppInfo:
    """Define app data"""
    name = "dsc-provisioner"
    namecase = "DSC Provisioner"
    version = "0.1.0"

class Defaults:
    """Default values applied when a provisioner option is left unset."""
    CONFIGURATION_FILE = "default.ps1"
    TEMP_DIR_PREFIX = "/tmp/vagrant-dsc-"
    COUNTER_NAME = "dsc_config"
    PROVISIONER_TYPE = "dsc"

class ErrorKeys:
    """Keys of the error message catalog."""
    MODULE_PATH_MISSING = "module_path_missing"
    MANIFESTS_PATH_MISSING = "manifests_path_missing"
    MANIFEST_MISSING = "manifest_missing"
    CONFIGURATION_DATA_MISSING = "configuration_data_missing"
    MANIFEST_AND_MOF_PROVIDED = "manifest_and_mof_provided"
    UNKNOWN_OPTION = "unknown_option"
    INVALID_OPTION = "invalid_option"
    INVALID_DEFINITION = "invalid_definition"

# Label under which validation errors are reported
ERROR_NAMESPACE = "dsc provisioner"
