"""Layered search: faceted product search with shareable navigation tokens."""
