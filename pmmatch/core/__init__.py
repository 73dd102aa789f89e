"""Core library components: configuration, logging, tracing and matching."""
