"""Command line interface for hipsweb."""
