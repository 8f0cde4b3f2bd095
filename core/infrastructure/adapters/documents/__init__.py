"""Document rendering adapters."""
