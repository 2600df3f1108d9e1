"""Traquila server control script.

Usage:
    traquila-server start [--host HOST] [--port PORT] [--reload] [--foreground]
    traquila-server stop
    traquila-server status
"""

import argparse
import json
import os
import signal
import subprocess
import sys
import time
import urllib.request
from pathlib import Path
from urllib.error import URLError

import uvicorn

from traquila.config import settings
from traquila.logging_config import configure_logging

DATA_DIR = Path("data")
PID_FILE = DATA_DIR / "traquila.pid"
LOG_FILE = DATA_DIR / "traquila-server.log"
APP_PATH = "traquila.main:app"


def get_pid() -> int | None:
    """Get the PID of the background server, if it is still running."""
    if not PID_FILE.exists():
        return None

    try:
        pid = int(PID_FILE.read_text().strip())
        os.kill(pid, 0)
        return pid
    except (ValueError, ProcessLookupError, PermissionError):
        # Stale PID file
        PID_FILE.unlink(missing_ok=True)
        return None


def start_server(host: str, port: int, reload: bool = False, foreground: bool = False) -> bool:
    """Start the Traquila server.

    Args:
        host: Host to bind to
        port: Port to bind to
        reload: Enable auto-reload for development
        foreground: Run in this process and block until interrupted

    Returns:
        True if the server started
    """
    pid = get_pid()
    if pid:
        print(f"Server is already running (PID: {pid})")
        return False

    print(f"Starting Traquila server on http://{host}:{port}")

    if foreground:
        configure_logging(settings.log_level, settings.log_file if settings.log_to_file else None)
        print("Press Ctrl+C to stop the server")
        uvicorn.run(APP_PATH, host=host, port=port, reload=reload)
        return True

    DATA_DIR.mkdir(parents=True, exist_ok=True)
    cmd = [sys.executable, "-m", "uvicorn", APP_PATH, "--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")

    with open(LOG_FILE, "w") as log:
        process = subprocess.Popen(cmd, stdout=log, stderr=subprocess.STDOUT, start_new_session=True)

    time.sleep(1)
    if process.poll() is not None:
        print(f"Failed to start server. See {LOG_FILE} for details.")
        return False

    PID_FILE.write_text(str(process.pid))
    print(f"Server started with PID: {process.pid}")
    print(f"Logs available at: {LOG_FILE}")
    return True


def stop_server() -> bool:
    """Stop the background server.

    Returns:
        True if a server was stopped
    """
    pid = get_pid()
    if not pid:
        print("Server is not running")
        return False

    print(f"Stopping server (PID: {pid})...")
    try:
        os.kill(pid, signal.SIGTERM)
        for _ in range(10):
            time.sleep(0.5)
            try:
                os.kill(pid, 0)
            except ProcessLookupError:
                break
        else:
            print("Server didn't stop gracefully, forcing...")
            os.kill(pid, signal.SIGKILL)
    except ProcessLookupError:
        print("Server was not running")
        return False
    except PermissionError:
        print(f"Permission denied to stop process {pid}")
        return False
    finally:
        PID_FILE.unlink(missing_ok=True)

    print("Server stopped")
    return True


def server_status(host: str, port: int) -> None:
    """Print whether the server runs and what its health check reports."""
    pid = get_pid()
    if not pid:
        print("Traquila server is not running")
        return

    print(f"Traquila server is running (PID: {pid})")
    try:
        with urllib.request.urlopen(f"http://{host}:{port}/health", timeout=2) as response:
            data = json.loads(response.read().decode())
        print(f"  Status: {data.get('status', 'unknown')}")
        print(f"  Version: {data.get('version', 'unknown')}")
    except (URLError, OSError, ValueError):
        print("  (Could not fetch health status)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Traquila server control script",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s start                  Start server in the background
  %(prog)s start --port 8080      Start server on port 8080
  %(prog)s start --foreground     Run in the foreground (blocking)
  %(prog)s stop                   Stop the background server
  %(prog)s status                 Check server status
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    start_parser = subparsers.add_parser("start", help="Start the server")
    start_parser.add_argument("--host", default=None, help="Host to bind to (default: from config)")
    start_parser.add_argument("--port", "-p", type=int, default=None, help="Port to bind to (default: from config)")
    start_parser.add_argument("--reload", "-r", action="store_true", help="Enable auto-reload for development")
    start_parser.add_argument("--foreground", "-f", action="store_true", help="Run in foreground (blocking)")

    subparsers.add_parser("stop", help="Stop the server")
    subparsers.add_parser("status", help="Check server status")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "start":
        host = args.host or settings.host
        port = args.port or settings.port
        try:
            success = start_server(host, port, reload=args.reload, foreground=args.foreground)
        except KeyboardInterrupt:
            print("\nServer stopped")
            return 0
        return 0 if success else 1

    if args.command == "stop":
        return 0 if stop_server() else 1

    server_status(settings.host, settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
