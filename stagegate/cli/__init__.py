"""Command-line handlers and argument wiring."""
