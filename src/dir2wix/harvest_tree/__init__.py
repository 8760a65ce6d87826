"""Harvesting of directory trees into identified structural records.

This package provides the walker that enumerates a directory tree under
exclusion rules, the records it produces, and a node type for previewing
the harvested structure.
"""
