"""Warden: user registration, login and JWT session authentication."""

__version__ = "0.1.0"
