# MCP Server constants
MCP_SERVER_NAME = "movie-catalog"

# Storage keys, one JSON document per collection
USERS_KEY = "crud_peliculas_users"
SESSION_KEY = "crud_peliculas_session"
MOVIES_KEY = "crud_peliculas_movies"
COLLECTION_KEYS = (USERS_KEY, SESSION_KEY, MOVIES_KEY)

# Storage backends
ALLOWED_STORAGE_BACKENDS = ["memory", "file", "couchbase"]
DEFAULT_STORAGE = "file"
DEFAULT_STORAGE_PATH = "~/.movie_catalog_mcp/storage.json"
DEFAULT_SCOPE_NAME = "_default"
DEFAULT_COLLECTION_NAME = "_default"

# Registration rules
MIN_USERNAME_LENGTH = 4
MIN_PASSWORD_LENGTH = 6

# Movies
DEFAULT_RECENT_LIMIT = 12
FALLBACK_IMAGE = "https://via.placeholder.com/500x300?text=Sin+imagen"

# Server defaults
DEFAULT_READ_ONLY_MODE = False
DEFAULT_TRANSPORT = "stdio"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LOG_LEVEL = "INFO"

# Allowed values for transport
ALLOWED_TRANSPORTS = ["stdio", "http", "sse"]
NETWORK_TRANSPORTS = ["http", "sse"]
NETWORK_TRANSPORTS_SDK_MAPPING = {
    "http": "streamable-http",
    "sse": "sse",
}
