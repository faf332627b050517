"""API route modules."""

from frameup.api.routes import health, pricing, projects, videos

__all__ = ["health", "pricing", "projects", "videos"]
