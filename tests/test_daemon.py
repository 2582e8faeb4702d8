"""Daemon wiring tests: checker/server construction and startup ordering."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from clustercheck.config.settings import load_settings
from clustercheck.core.verdict import Verdict, VerdictCell, VerdictReason
from clustercheck.engine import daemon


@pytest.fixture
def settings(make_script, marker_paths):
    script = make_script("echo 'wsrep_local_state 4'; echo 'wsrep_local_state_comment Synced'")
    up, fail = marker_paths
    return load_settings(
        {
            "probe": {"binary": script, "timeout": 5},
            "check": {"interval": 60},
            "overrides": {"force_up_file": str(up), "force_fail_file": str(fail)},
            "server": {"bind_address": "127.0.0.1", "port": 19200},
        }
    )


def test_build_server_uses_bind_settings(settings):
    server = daemon.build_server(settings, VerdictCell())
    assert server.config.host == "127.0.0.1"
    assert server.config.port == 19200


def test_empty_bind_address_means_all_interfaces(settings):
    from dataclasses import replace

    server = daemon.build_server(replace(settings, bind_address=""), VerdictCell())
    assert server.config.host == "0.0.0.0"


def test_server_app_serves_cell(settings, marker_paths):
    cell = VerdictCell(Verdict(True, "Synced", VerdictReason.HEALTHY))
    server = daemon.build_server(settings, cell)
    client = TestClient(server.config.app)
    assert client.get("/").text == "Synced"
    marker_paths[1].touch()
    assert client.get("/").status_code == 503


def test_redact_password():
    assert daemon._redact(["mysql", "--password=x", "-u", "a"]) == ["mysql", "--password=***", "-u", "a"]


@pytest.mark.asyncio
async def test_first_check_runs_before_serving(settings):
    order = []

    async def fake_check_once(self):
        order.append("check")
        return Verdict(True, "Synced", VerdictReason.HEALTHY)

    async def fake_serve(self):
        order.append("serve")
        self.started = True

    with patch.object(daemon.ClusterChecker, "check_once", new=fake_check_once), \
            patch("uvicorn.Server.serve", new=fake_serve):
        await daemon.serve(settings)
    assert order[:2] == ["check", "serve"]


@pytest.mark.asyncio
async def test_serve_publishes_real_probe_result(settings):
    captured = {}

    async def fake_serve(self):
        # Verdict is read through the app, as a request would
        client = TestClient(self.config.app)
        r = client.get("/")
        captured["status"] = r.status_code
        captured["body"] = r.text
        self.started = True

    with patch("uvicorn.Server.serve", new=fake_serve):
        await daemon.serve(settings)
    assert captured == {"status": 200, "body": "Synced"}


@pytest.mark.asyncio
async def test_bind_failure_raises(settings):
    async def fake_serve(self):
        raise SystemExit(1)

    with patch("uvicorn.Server.serve", new=fake_serve):
        with pytest.raises(daemon.ServerStartupError):
            await daemon.serve(settings)
