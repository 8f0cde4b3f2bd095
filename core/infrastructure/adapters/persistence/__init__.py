"""Order store adapters."""
