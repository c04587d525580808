"""Command-line interface for inspecting identity registry snapshots."""
