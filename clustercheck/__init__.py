"""Galera cluster node health check: probe wsrep status, publish verdict over HTTP."""

__version__ = "0.1.0"
