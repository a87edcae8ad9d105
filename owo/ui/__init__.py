"""Command-line and terminal output layer."""
