"""Pulsar: a micro-blogging REST API."""

__version__ = "1.0.0"
