"""
Search engine: ignore handling, directory walking, the worker pool and
synchronized output
"""
