"""Reference data (counties and sub-counties)."""

from wasifu.reference.counties import CountyDirectory, load_counties

__all__ = ["CountyDirectory", "load_counties"]
