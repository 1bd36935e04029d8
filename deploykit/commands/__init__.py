"""CLI commands for deploykit."""
