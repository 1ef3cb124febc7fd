"""Code shared by the API and the storefront host."""
