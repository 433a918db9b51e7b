"""linkshortener: link resolution and caching core of a URL shortener."""

__version__ = '0.1.0'
