"""Core lifecycle, management and version primitives."""
