"""Command-line client for a filedrop server."""
