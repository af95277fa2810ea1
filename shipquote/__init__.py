"""
ShipQuote - shipment quote aggregation.

Fans a shipment request out to the configured pricing providers, collects
what answers in time, and marks the cheapest and fastest offers.
"""
__version__ = "1.0.0"
