"""Semantic event names emitted by the configuration loader."""

# Locating
CONFIG_SEARCH = "config_search"
CONFIG_FILE_RESOLVED = "config_file_resolved"

# Reading
CONFIG_READ = "config_read"
CONFIG_FILE_EMPTY = "config_file_empty"
CONFIG_UNKNOWN_KEYS = "config_unknown_keys"
ENV_FILES_LOADED = "env_files_loaded"
ENV_OVERRIDE_APPLIED = "env_override_applied"

# Writing
CONFIG_DEFAULT_WRITTEN = "config_default_written"
CONFIG_WRITTEN = "config_written"

# Outcome
CONFIG_LOADED = "config_loaded"
CONFIG_LOAD_FAILED = "config_load_failed"
CONFIG_SECURE_COPY = "config_secure_copy"
LOG_LEVEL_CHANGED = "log_level_changed"
