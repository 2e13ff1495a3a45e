"""Spatial layouts for the causal network."""
