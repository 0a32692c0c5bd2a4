"""Packaged analyzers. Every module here is imported by numnerd.registry.discover()."""
