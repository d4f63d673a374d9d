"""Generative-AI helpers used by the chart export pipeline."""
