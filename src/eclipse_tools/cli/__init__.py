"""Command-line interface for eclipse-tools."""
