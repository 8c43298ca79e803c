"""asanakit: typed client for the Asana REST API."""

__version__ = "0.1.0"

from asanakit.client import DEFAULT_BASE_URL, USER_AGENT, AsanaClient, decode_response
from asanakit.config import Settings, build_client, load_settings
from asanakit.errors import (
    AsanaError,
    ConfigError,
    RequestError,
    TimeoutError,
    TransportError,
    ValidationError,
)
from asanakit.models import (
    ErrorDetail,
    Filter,
    Project,
    Resource,
    Tag,
    Task,
    TaskUpdate,
    Team,
    User,
    Webhook,
    Workspace,
)

__all__ = [
    # Core
    "AsanaClient",
    "DEFAULT_BASE_URL",
    "USER_AGENT",
    "decode_response",
    # Configuration
    "Settings",
    "build_client",
    "load_settings",
    # Errors
    "AsanaError",
    "ConfigError",
    "RequestError",
    "TimeoutError",
    "TransportError",
    "ValidationError",
    # Models
    "ErrorDetail",
    "Filter",
    "Project",
    "Resource",
    "Tag",
    "Task",
    "TaskUpdate",
    "Team",
    "User",
    "Webhook",
    "Workspace",
]
