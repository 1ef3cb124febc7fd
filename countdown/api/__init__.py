"""Admin and storefront REST API."""
