"""Shared utilities for muxproj."""
