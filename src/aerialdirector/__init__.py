"""Aerial Director - reference photo to vertical drone-shot video."""
