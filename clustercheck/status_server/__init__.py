"""HTTP health endpoint for load balancer checks."""

from clustercheck.status_server.app import create_app
from clustercheck.status_server.overrides import OverrideMarkers

__all__ = ["create_app", "OverrideMarkers"]
