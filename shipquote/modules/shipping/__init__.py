"""Shipping module: pricing providers and their shared data shapes."""
