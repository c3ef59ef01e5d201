"""
Unit tests for the botctl operator script.
"""

from unittest.mock import Mock, patch

import requests

import botctl


def make_response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


@patch("botctl.requests.request")
def test_status(mock_request, capsys):
    mock_request.return_value = make_response({
        "success": True,
        "status": "running",
        "bot": {"uptime_seconds": 42.0, "last_error": None}
    })

    assert botctl.main(["--url", "http://control:8000", "status"]) == 0

    mock_request.assert_called_once_with("GET", "http://control:8000/api/bot/status", timeout=botctl.REQUEST_TIMEOUT)
    out = capsys.readouterr().out
    assert "RUNNING" in out
    assert "42s" in out


@patch("botctl.requests.request")
def test_restart(mock_request, capsys):
    mock_request.return_value = make_response({"success": True, "status": "running"})

    assert botctl.main(["restart"]) == 0

    method, url = mock_request.call_args[0]
    assert method == "POST"
    assert url.endswith("/api/bot/restart")


@patch("botctl.requests.request")
def test_command_failure_exit_code(mock_request, capsys):
    mock_request.return_value = make_response({
        "success": False,
        "error": "Engine start failed",
        "error_type": "EngineUnavailable",
        "status": "idle"
    }, status_code=503)

    assert botctl.main(["start"]) == 1

    err = capsys.readouterr().err
    assert "Engine start failed" in err
    assert "EngineUnavailable" in err


@patch("botctl.requests.request")
def test_config_get(mock_request, capsys):
    mock_request.return_value = make_response({"success": True, "config": "mode=live\n"})

    assert botctl.main(["config", "get"]) == 0
    assert capsys.readouterr().out == "mode=live\n"


@patch("botctl.requests.request")
def test_config_set(mock_request, tmp_path):
    path = tmp_path / "engine.toml"
    path.write_text("mode=dry\n")
    mock_request.return_value = make_response({"success": True, "revision": 4})

    assert botctl.main(["config", "set", str(path), "--base-revision", "3"]) == 0

    assert mock_request.call_args[1]["json"] == {"config": "mode=dry\n", "base_revision": 3}


@patch("botctl.requests.request")
def test_unreachable_control_plane(mock_request, capsys):
    mock_request.side_effect = requests.ConnectionError("refused")

    assert botctl.main(["status"]) == 2
    assert "Could not reach control plane" in capsys.readouterr().err


@patch("botctl.requests.request")
def test_non_json_response(mock_request, capsys):
    response = Mock(status_code=502, text="Bad Gateway")
    response.json.side_effect = ValueError("no json")
    mock_request.return_value = response

    assert botctl.main(["stop"]) == 1
    assert "HTTP 502" in capsys.readouterr().err
