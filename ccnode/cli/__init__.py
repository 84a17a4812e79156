"""Command-line entry point for the ccNode daemon."""
