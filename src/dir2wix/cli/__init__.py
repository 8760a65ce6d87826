"""Command-line interface for dir2wix."""
