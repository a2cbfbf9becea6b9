"""Core data models shared across the guideline engine and the exporter."""
