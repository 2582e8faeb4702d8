"""Daemon wiring: settings -> fetcher/checker/cell -> FastAPI app served by uvicorn.

The first check completes before the HTTP port is bound, so the first response
is only "Initializing" if nothing has been published yet."""

import asyncio
import logging
from typing import List, Optional, Sequence

import uvicorn

from clustercheck.config.settings import ClusterCheckSettings
from clustercheck.core.verdict import VerdictCell
from clustercheck.engine.checker import ClusterChecker
from clustercheck.probe.fetcher import StatusFetcher
from clustercheck.status_server.app import create_app
from clustercheck.status_server.overrides import OverrideMarkers

logger = logging.getLogger(__name__)


class ServerStartupError(RuntimeError):
    """The HTTP server could not start (typically: port already in use)."""


def build_checker(settings: ClusterCheckSettings, cell: Optional[VerdictCell] = None) -> ClusterChecker:
    fetcher = StatusFetcher(settings.probe_command, timeout=settings.policy.probe_timeout)
    return ClusterChecker(fetcher, settings.policy, cell)


def build_server(settings: ClusterCheckSettings, cell: VerdictCell, log_level: str = "info") -> uvicorn.Server:
    """uvicorn server for the health app. Signals are handled by uvicorn."""
    app = create_app(
        cell,
        OverrideMarkers(
            force_up_file=settings.force_up_file,
            force_fail_file=settings.force_fail_file,
        ),
    )
    host = settings.bind_address or "0.0.0.0"
    config = uvicorn.Config(app, host=host, port=settings.bind_port, log_level=log_level)
    return uvicorn.Server(config)


def _redact(command: Sequence[str]) -> List[str]:
    return ["--password=***" if a.startswith("--password=") else a for a in command]


async def serve(settings: ClusterCheckSettings, log_level: str = "info") -> None:
    """Run checker and HTTP server in one event loop until the server exits."""
    cell = VerdictCell()
    checker = build_checker(settings, cell)
    server = build_server(settings, cell, log_level=log_level)

    logger.info("Probe command: %s", " ".join(_redact(settings.probe_command)))
    await checker.check_once()

    checker_task = asyncio.create_task(checker.run(initial_check=False))
    logger.info("Listening on %s:%s", settings.bind_address, settings.bind_port)
    try:
        await server.serve()
    except SystemExit as e:
        # uvicorn exits on bind failure
        raise ServerStartupError(
            f"could not serve on {settings.bind_address}:{settings.bind_port}"
        ) from e
    finally:
        checker.stop()
        try:
            await checker_task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug("Checker task raised on shutdown: %s", e)
    if not server.started:
        raise ServerStartupError(f"could not serve on {settings.bind_address}:{settings.bind_port}")


def run_daemon(settings: ClusterCheckSettings, log_level: str = "info") -> None:
    """Blocking entry point."""
    asyncio.run(serve(settings, log_level=log_level))
