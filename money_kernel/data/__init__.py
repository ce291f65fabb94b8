"""Packaged ISO 4217 / ISO 3166 lookup tables."""
