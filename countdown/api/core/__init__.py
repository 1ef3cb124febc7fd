"""Core API infrastructure: settings, logging, dependencies."""
