"""Mapping statement parsing and mapping rule checks."""
