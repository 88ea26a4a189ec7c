"""Threadline: data access for users, communities and threaded discussions."""

__version__ = "0.1.0"
