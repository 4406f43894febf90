"""Infrastructure layer — host catalogs of loaded modules and types."""
