"""
Constants

Content types, size limits and defaults shared across the tool.
"""

# Maximum size for configuration data (2MB)
MAX_CONFIG_SIZE = 2 * 1024 * 1024

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_YAML = "application/x-yaml"
CONTENT_TYPE_TEXT = "text/plain"

PROFILE_TYPE_FEATURE_FLAGS = "AWS.AppConfig.FeatureFlags"
PROFILE_TYPE_FREEFORM = "AWS.Freeform"

STRATEGY_PREFIX_PREDEFINED = "AppConfig."
DEFAULT_DEPLOYMENT_STRATEGY = "AppConfig.AllAtOnce"

DEFAULT_CONFIG_FILE = "apcdeploy.yml"

# Seconds
DEFAULT_TIMEOUT = 600
DEFAULT_POLL_INTERVAL = 5

# Files written by ``init`` for each content type
DATA_FILE_NAMES = {
    CONTENT_TYPE_JSON: "data.json",
    CONTENT_TYPE_YAML: "data.yaml",
    "application/yaml": "data.yaml",
    CONTENT_TYPE_TEXT: "data.txt",
}
