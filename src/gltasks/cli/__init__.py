"""Command line commands."""
