"""Core data model, classification and graph primitives."""
