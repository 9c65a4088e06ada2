"""Shared helpers: terminal logging and YAML loading."""
