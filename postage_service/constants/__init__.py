"""
Constants Package

Pricing tariffs, ETA rules and carrier wire identifiers.
"""
