"""Command-line interface for uefast."""
