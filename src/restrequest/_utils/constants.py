# Headers
HEADER_ACCEPT = "Accept"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"

# Content types
CONTENT_TYPE_JSON = "application/json"

# Environment variables
ENV_CONNECT_TIMEOUT = "RESTREQUEST_CONNECT_TIMEOUT"
ENV_READ_TIMEOUT = "RESTREQUEST_READ_TIMEOUT"
ENV_MAX_WORKERS = "RESTREQUEST_MAX_WORKERS"
ENV_MAX_RETRIES = "RESTREQUEST_MAX_RETRIES"
ENV_INSECURE = "RESTREQUEST_INSECURE"
ENV_PROXY = "RESTREQUEST_PROXY"

# Files
DOTENV_FILE = ".env"

# Logging
LOGGER_NAME = "restrequest"

# Breaker
CIRCUIT_OPEN_MESSAGE = "Circuit is open"

# Downloads
DOWNLOAD_CHUNK_SIZE = 64 * 1024
