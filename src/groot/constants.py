"""Constants used throughout Groot."""

# Version
VERSION = "0.1.0"

# Directory names
GROOT_DIR = ".groot"
OBJECTS_DIR = "objects"

# File names
HEAD_FILE = "HEAD"
INDEX_FILE = "index"

# Hash algorithm
HASH_ALGORITHM = "sha256"
HASH_LENGTH = 64  # SHA-256 produces 64 hex characters

# Abbreviated hashes
MIN_PREFIX_LENGTH = 4
SHORT_HASH_LENGTH = 7

# Text encoding for commit records, index and diffed blobs
ENCODING = "utf-8"

# Exit codes
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2
EXIT_DATA_ERROR = 3
