"""Aerial Director CLI package."""
