"""
threadgrep - multi-threaded, ignore-file aware text search
"""

__version__ = "0.1.0"
