"""API route modules."""

from aerialdirector.api.routes import credentials, generations, health

__all__ = ["health", "credentials", "generations"]
