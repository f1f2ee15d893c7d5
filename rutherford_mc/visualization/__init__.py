"""Visualization module: Matplotlib plots and animation."""
