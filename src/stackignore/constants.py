"""
Central configuration for ignore file processing
"""

# Name of the per-directory rule file
IGNORE_FILENAME = ".gitignore"

# pathspec pattern factory used to compile rules
PATTERN_STYLE = "gitwildmatch"

# Limits for security and performance
MAX_IGNORE_FILE_SIZE = 1024 * 1024  # 1MB
MAX_PATTERNS_PER_FILE = 10000
