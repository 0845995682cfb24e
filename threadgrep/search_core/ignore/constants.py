"""
Central configuration for ignore file processing
"""

# Only files with exactly these names are read as ignore files
IGNORE_FILENAMES = (".gitignore", ".ignore")

# Directories skipped at any depth regardless of ignore file content
ALWAYS_IGNORED_DIRS = frozenset({".git"})

# Separator used in the subject strings that patterns are matched against
PATH_SEPARATOR = "/"

# Starts a comment when unescaped
COMMENT_CHAR = "#"

# Marks a rule as a re-inclusion
NEGATION_CHAR = "!"

# Limits for security and performance
MAX_IGNORE_FILE_SIZE = 1024 * 1024  # 1MB
