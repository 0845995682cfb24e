"""
Core constants for the threadgrep search engine
"""

# Bytes read from a file to decide whether it is text
TEXT_SAMPLE_SIZE = 1024

# Worker count when hardware parallelism cannot be detected
DEFAULT_THREADS = 8

# Bounded task queue holds this many items per worker
QUEUE_MULTIPLIER = 4

# Appended to the file path to form the per-file output header
HEADER_SUFFIX = ":"
