"""Outer surfaces over the provider layer (command-line tooling)."""
