"""Core project lifecycle, synthesis and rendering."""
