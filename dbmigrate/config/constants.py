"""
Configuration constants for dbmigrate.

Defaults shared by the configuration models, the registry and the CLI.
"""

# Default config file looked up in the working directory
DEFAULT_CONFIG_FILENAME = "dbmigrate.yaml"

# Migration units are named <base_name><ordinal>, e.g. Migration_7
DEFAULT_BASE_NAME = "Migration_"

# First ordinal probed by discovery
DEFAULT_START_INDEX = 1

# Bookkeeping table holding the current schema version
DEFAULT_VERSION_TABLE = "schema_version"

# Separates a unit name from its dialect qualifier: Migration_7$PostgreSQL
DIALECT_SEPARATOR = "$"
