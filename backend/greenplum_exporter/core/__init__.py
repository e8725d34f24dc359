"""Core sampling logic, configuration, and cross-cutting concerns."""
