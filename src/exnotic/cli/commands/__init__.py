"""CLI command groups for exnotic."""
