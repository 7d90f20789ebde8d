"""Command-line interface for compatible-with."""
