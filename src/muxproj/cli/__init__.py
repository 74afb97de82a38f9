"""Command-line interface for muxproj."""
