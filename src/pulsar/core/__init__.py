"""Configuration, security and error handling shared across the app."""
