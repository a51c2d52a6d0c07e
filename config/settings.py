"""Project configuration settings.

Defaults only; anything read from the environment is resolved at call time
(see `BackupConfig.from_env`) so tests and the CLI can override it.
"""

# Server
DEFAULT_SERVER_URL = "https://localhost"
SERVER_URL_ENV = "CHEF_SERVER_URL"
CHEF_VERSION = "11.0.0"  # sent as X-Chef-Version
DEFAULT_TIMEOUT = 30  # seconds
TIMEOUT_ENV = "CHEF_TIMEOUT"
SSL_VERIFY_ENV = "CHEF_SSL_VERIFY"

# Request signing
CLIENT_NAME_ENV = "CHEF_CLIENT_NAME"
CLIENT_KEY_ENV = "CHEF_CLIENT_KEY"  # path to the client PEM key
SIGN_VERSION = "1.3"
SERVER_API_VERSION = "1"

# Backup locations
DEFAULT_FILE_BACKUP_PATH = "/var/chef/backup"
FILE_BACKUP_PATH_ENV = "CHEF_FILE_BACKUP_PATH"
BACKUP_DIR_ENV = "CHEF_BACKUP_DIR"
TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"
TIMESTAMP_OFFSET = "-0000"

# Component types, in processing order: name -> (singular, REST endpoint)
COMPONENT_TYPES = {
	"nodes": ("node", "nodes"),
	"roles": ("role", "roles"),
	"environments": ("environment", "environments"),
	"data_bags": ("data_bag", "data"),
}
DEFAULT_ENVIRONMENT = "_default"

# Logging
LOG_LEVEL = "INFO"
LOG_LEVEL_ENV = "CHEF_BACKUP_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

__all__ = [
	'DEFAULT_SERVER_URL','SERVER_URL_ENV','CHEF_VERSION','DEFAULT_TIMEOUT','TIMEOUT_ENV','SSL_VERIFY_ENV',
	'CLIENT_NAME_ENV','CLIENT_KEY_ENV','SIGN_VERSION','SERVER_API_VERSION',
	'DEFAULT_FILE_BACKUP_PATH','FILE_BACKUP_PATH_ENV','BACKUP_DIR_ENV','TIMESTAMP_FORMAT','TIMESTAMP_OFFSET',
	'COMPONENT_TYPES','DEFAULT_ENVIRONMENT','LOG_LEVEL','LOG_LEVEL_ENV','LOG_FORMAT'
]
