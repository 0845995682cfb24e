"""Command line entry points for threadgrep"""
