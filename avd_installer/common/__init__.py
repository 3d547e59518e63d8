"""
Shared helpers: command execution, downloads, registry, services and logging.
"""
