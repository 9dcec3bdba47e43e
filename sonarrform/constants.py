# Provider name, prefixed to every resource and data source type
PROVIDER_NAME = "sonarr"

# Environment fallbacks for the provider configuration
ENV_URL = "SONARR_URL"
ENV_API_KEY = "SONARR_API_KEY"


# Placeholder used wherever a sensitive value would otherwise be shown
SENSITIVE_VALUE = "********"

# Singleton configs always live at this id on the server
SINGLETON_ID = 1

# Operation verbs used in diagnostics
CREATE = "create"
READ = "read"
UPDATE = "update"
DELETE = "delete"
IMPORT = "import"
FIND = "find"

# Plan actions
PLAN_CREATE = "create"
PLAN_UPDATE = "update"
PLAN_REPLACE = "replace"
PLAN_DELETE = "delete"
PLAN_NOOP = "noop"

VALID_PROTOCOLS = ["torrent", "usenet"]

# Seconds before a request to the server is abandoned
REQUEST_TIMEOUT = 30
