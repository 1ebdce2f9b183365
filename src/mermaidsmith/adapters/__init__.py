"""Adapters connecting the core pipeline to external tools and formats."""
