"""HeroDex: browse, search, pin and deep-link into a static catalog of heroes."""

__version__ = "0.3.0"
