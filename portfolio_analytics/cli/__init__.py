"""Command-line interface: argument parsing, logging setup and output formatting."""
