"""Command-line interface for hexhost."""
