"""Constants used throughout the Structurizr workspace client."""

__version__ = "0.1.0"

DEFAULT_USER_AGENT = f"structurizr-client/{__version__}"
DEFAULT_TIMEOUT = 30.0

# ============================================================================
# Workspace API paths
# ============================================================================
API_BASE_PATH = "/api"
WORKSPACE_LIST_CREATE_PATH = "/api/workspace"
WORKSPACE_GET_UPDATE_DELETE_PATH = "/api/workspace/{id}"

# ============================================================================
# Environment variables
# ============================================================================
ENV_HOST = "STRUCTURIZR_HOST"
ENV_ADMIN_API_KEY = "STRUCTURIZR_ADMIN_API_KEY"
ENV_TLS_INSECURE = "STRUCTURIZR_TLS_INSECURE"
ENV_TIMEOUT = "STRUCTURIZR_TIMEOUT"
ENV_CLI_DIR = "STRUCTURIZR_CLI_DIR"
