"""
cpln-provider Constants

Centralized constants for magic values, defaults, and configuration.
"""

# Default API Configuration
DEFAULT_ENDPOINT = "https://api.cpln.io"
DEFAULT_TIMEOUT = 30
DEFAULT_LOG_DIR = "logs"

# Default File Locations
DEFAULT_CONFIG_FILE = "cpln.yml"
DEFAULT_STATE_FILE = "cpln.state.yml"
STATE_FORMAT_VERSION = 1

# Environment Variables
ENV_ORG = "CPLN_ORG"
ENV_ENDPOINT = "CPLN_ENDPOINT"
ENV_TOKEN = "CPLN_TOKEN"
ENV_TIMEOUT = "CPLN_TIMEOUT"
ENV_LOG_DIR = "CPLN_LOG_DIR"

# Resource Type Names
RESOURCE_DOMAIN_ROUTE = "cpln_domain_route"
RESOURCE_SECRET = "cpln_secret"

# Domain Route Defaults
DEFAULT_DOMAIN_PORT = 443

# Secret Data Shapes (exactly one may be set per secret)
SECRET_DATA_OBJECT_NAMES = [
    "aws",
    "azure_connector",
    "azure_sdk",
    "docker",
    "dictionary",
    "ecr",
    "gcp",
    "keypair",
    "opaque",
    "tls",
    "userpass",
    "nats_account",
]

# Shapes whose data is a raw JSON document
SECRET_JSON_TYPES = ["gcp", "docker", "azure_sdk"]

# Shapes whose keys are renamed between local and remote form
SECRET_MAPPED_TYPES = ["aws", "ecr", "keypair", "tls", "nats_account"]

# Local type name -> remote type name (all others are identical)
SECRET_TYPE_HYPHENATED = {
    "azure_sdk": "azure-sdk",
    "azure_connector": "azure-connector",
    "nats_account": "nats-account",
}

# Secret references exposed to workloads
SECRET_ENV_REFERENCE_FORMAT = "cpln://secret/{name}.{key}"

# Tags managed by the platform (never copied into local state)
SYSTEM_TAG_PREFIX = "cpln/"

# Validation Limits
NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 250
TAG_KEY_MAX_LENGTH = 128
TAG_VALUE_MAX_LENGTH = 256
ECR_REPOS_MIN = 1
ECR_REPOS_MAX = 20
SECRET_ENCODINGS = ["plain", "base64"]


# Error Messages
ERROR_RESOURCE_EXISTS = "Resource already exists"
ERROR_RESOURCE_EXISTS_DETAIL = (
    "A resource with this name already exists. Import it into state, "
    "or choose another name."
)
ERROR_UNKNOWN_SECRET_TYPE = "unable to extract secret type"
ERROR_INVALID_SECRET_DATA = "invalid secret input or data type. Secret type: {type}"
