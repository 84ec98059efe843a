"""
Tests for application bootstrap: app factory, lifespan and entry point.
"""

from unittest.mock import patch

import httpx
from fastapi.testclient import TestClient

from vacation.config import get_settings
from vacation.main import build_parser, main
from web.app import create_app


def _test_settings():
    return get_settings().model_copy(update={"scheduler_enabled": False})


class TestCreateApp:
    def test_routes_are_mounted(self):
        app = create_app()
        paths = {route.path for route in app.routes}
        assert "/api/leave-requests" in paths
        assert "/api/leave-requests/{request_id}/approve" in paths
        assert "/api/balances/{employee_id}" in paths
        assert "/health" in paths

    def test_transport_enables_clients_immediately(self):
        app = create_app(http_transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])))
        assert app.state.http_clients.names() == ["hr", "payroll"]

    def test_lifespan_starts_and_stops(self):
        app = create_app(_test_settings())
        with patch("vacation.lifecycle.init_db") as mock_init_db:
            with TestClient(app):
                mock_init_db.assert_called_once()
                assert app.state.http_clients is not None
        assert len(app.state.http_clients) == 0

    def test_lifespan_uses_the_settings_given_to_create_app(self):
        settings = _test_settings().model_copy(update={"http_clients_enabled": False})
        app = create_app(settings)
        assert app.state.settings is settings

        with patch("vacation.lifecycle.init_db"), \
                patch("vacation.lifecycle.SchedulerManager") as mock_scheduler:
            with TestClient(app):
                assert app.state.http_clients.names() == []
        mock_scheduler.assert_not_called()

    def test_lifespan_starts_scheduler_when_enabled(self):
        settings = _test_settings().model_copy(update={"scheduler_enabled": True})
        app = create_app(settings)
        with patch("vacation.lifecycle.init_db"), \
                patch("vacation.lifecycle.SchedulerManager") as mock_scheduler:
            with TestClient(app):
                mock_scheduler.assert_called_once_with(app.state.http_clients, settings)
                mock_scheduler.return_value.start.assert_called_once()
        mock_scheduler.return_value.shutdown.assert_called_once()


class TestMain:
    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.host is None
        assert args.port is None
        assert args.reload is False

    def test_main_runs_uvicorn_with_settings(self):
        settings = get_settings()
        with patch("vacation.main.uvicorn.run") as mock_run:
            assert main([]) == 0
        mock_run.assert_called_once_with(
            "web.app:app",
            host=settings.server_host,
            port=settings.server_port,
            reload=False,
            log_level=settings.log_level.lower(),
        )

    def test_main_command_line_overrides(self):
        with patch("vacation.main.uvicorn.run") as mock_run:
            main(["--host", "127.0.0.1", "--port", "9000", "--reload", "--log-level", "DEBUG"])
        kwargs = mock_run.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9000
        assert kwargs["reload"] is True
        assert kwargs["log_level"] == "debug"

    def test_explicit_port_zero_is_kept(self):
        with patch("vacation.main.uvicorn.run") as mock_run:
            main(["--port", "0", "--host", ""])
        assert mock_run.call_args.kwargs["port"] == 0
        assert mock_run.call_args.kwargs["host"] == ""
