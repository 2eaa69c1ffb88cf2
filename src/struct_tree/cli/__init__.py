"""Command-line interface for struct."""
