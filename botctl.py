#!/usr/bin/env python3
"""
Bot Control Script - operate the engine through the control plane API.

Examples:
    python botctl.py status
    python botctl.py restart
    python botctl.py config get > engine.toml
    python botctl.py config set engine.toml --base-revision 3
"""

import argparse
import os
import sys

import requests

API_BASE_URL = os.environ.get("BOT_CONTROL_URL", "http://localhost:8000")
REQUEST_TIMEOUT = 30

STATUS_ICONS = {
    'running': '🟢',
    'starting': '🟡',
    'stopping': '🟡',
    'idle': '⚪',
}


class BotControlClient:
    """Thin client for the control plane REST API."""

    def __init__(self, base_url: str = API_BASE_URL, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _call(self, method: str, path: str, **kwargs) -> dict:
        response = requests.request(
            method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs
        )
        try:
            return response.json()
        except ValueError:
            return {"success": False, "error": f"HTTP {response.status_code}: {response.text}"}

    def status(self) -> dict:
        return self._call("GET", "/api/bot/status")

    def command(self, command: str) -> dict:
        return self._call("POST", f"/api/bot/{command}")

    def get_config(self) -> dict:
        return self._call("GET", "/api/config")

    def set_config(self, config: str, base_revision=None) -> dict:
        return self._call("POST", "/api/config", json={"config": config, "base_revision": base_revision})

    def get_draft(self) -> dict:
        return self._call("GET", "/api/config/draft")

    def reset_draft(self) -> dict:
        return self._call("POST", "/api/config/draft/reset")

    def save_draft(self) -> dict:
        return self._call("POST", "/api/config/save")


def _report(result: dict, ok_message: str) -> int:
    if result.get("success"):
        print(f"✅ {ok_message}")
        return 0
    print(f"❌ {result.get('error', 'Unknown error')}", file=sys.stderr)
    if result.get("error_type"):
        print(f"   Error type: {result['error_type']}", file=sys.stderr)
    return 1


def run(args: argparse.Namespace, client: BotControlClient) -> int:
    if args.action == "status":
        result = client.status()
        if not result.get("success"):
            return _report(result, "")
        status = result["status"]
        print(f"{STATUS_ICONS.get(status, '⚪')} Status: {status.upper()}")
        bot = result.get("bot", {})
        if bot.get("uptime_seconds") is not None:
            print(f"   Uptime: {bot['uptime_seconds']:.0f}s")
        if bot.get("last_error"):
            print(f"   Last error: {bot['last_error']}")
        return 0

    if args.action in ("start", "stop", "restart"):
        result = client.command(args.action)
        status = result.get("status", "unknown")
        return _report(result, f"Bot {args.action} completed, status: {status.upper()}")

    if args.config_action == "get":
        result = client.get_config()
        if not result.get("success"):
            return _report(result, "")
        sys.stdout.write(result["config"])
        return 0

    if args.config_action == "set":
        with open(args.file, 'r') as f:
            document = f.read()
        result = client.set_config(document, base_revision=args.base_revision)
        return _report(result, f"Configuration saved (revision {result.get('revision')})")

    if args.config_action == "draft":
        result = client.get_draft()
        if not result.get("success"):
            return _report(result, "")
        document = result["document"]
        print(f"# revision {document['revision']} ({document['provenance']})")
        sys.stdout.write(document["draft"])
        return 0

    if args.config_action == "reset":
        return _report(client.reset_draft(), "Draft reset to baseline")

    return _report(client.save_draft(), "Draft saved")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Control the trading engine")
    parser.add_argument("--url", default=API_BASE_URL, help="Control plane API URL")
    actions = parser.add_subparsers(dest="action", required=True)

    actions.add_parser("status", help="Show engine status")
    actions.add_parser("start", help="Start the engine")
    actions.add_parser("stop", help="Stop the engine")
    actions.add_parser("restart", help="Restart the engine")

    config = actions.add_parser("config", help="Engine configuration")
    config_actions = config.add_subparsers(dest="config_action", required=True)
    config_actions.add_parser("get", help="Fetch configuration from the engine")
    set_parser = config_actions.add_parser("set", help="Submit a configuration file")
    set_parser.add_argument("file", help="Configuration file to submit")
    set_parser.add_argument("--base-revision", type=int, help="Revision the file was edited against")
    config_actions.add_parser("draft", help="Show the current draft")
    config_actions.add_parser("reset", help="Discard draft edits")
    config_actions.add_parser("save", help="Submit the current draft")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    client = BotControlClient(args.url)
    try:
        return run(args, client)
    except requests.RequestException as e:
        print(f"❌ Could not reach control plane at {args.url}: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
