"""Configuration layer — settings models, file discovery, logging setup."""
