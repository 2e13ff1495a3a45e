"""Traversal and network analysis over classified edges."""
