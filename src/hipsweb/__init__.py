"""hipsweb: layout and cascade exploration for the HIPs multi-hazard causal network."""

__version__ = "0.3.0"
