"""pkgscout - find package managers wherever they live and list what they installed."""

__version__ = "0.1.0"
