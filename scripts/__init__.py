"""Operator tooling for the Artha core."""
