"""Microblog: a small posting and liking service."""

__version__ = "0.1.0"
