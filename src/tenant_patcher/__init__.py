"""Install micro-frontend app bundles on tenants through pull requests."""

__version__ = "0.1.0"
