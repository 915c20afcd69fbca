"""Podsite - podcast website backend with a cached feed and an audio proxy."""

__version__ = "0.1.0"
