"""
Server configuration.

Sources, highest precedence first: CLI flag, environment variable, default.
The ``.env`` file is loaded into the environment before resolution.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Literal, Mapping, Sequence

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from core.logging_core import log_info

DEFAULT_HTTP_PORT = 3333

Source = Literal["cli", "env", "default"]


class ConfigSources(BaseModel):
    env_file: Literal["cli", "default"] = "default"
    stdio: Source = "default"
    http: Source = "default"
    remote: Source = "default"
    port: Source = "default"


class ServerConfig(BaseModel):
    is_stdio_mode: bool = False
    is_http_mode: bool = False
    is_remote_mode: bool = False
    http_port: int = Field(default=DEFAULT_HTTP_PORT, ge=1, le=65535)
    log_level: str = "INFO"
    env_file: str = ".env"
    config_sources: ConfigSources = Field(default_factory=ConfigSources)

    @property
    def http_host(self) -> str:
        """Remote deployments listen on every interface, local HTTP on loopback only."""
        return "0.0.0.0" if self.is_remote_mode else "127.0.0.1"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flutter-check-design",
        description="MCP server for building, running and screenshotting Flutter iOS apps",
    )
    parser.add_argument("--env", help="Path to a custom .env file to load environment variables from")
    parser.add_argument("--stdio", action="store_true", help="Run in stdio mode for MCP client communication")
    parser.add_argument("--http", action="store_true", help="Run in HTTP (SSE) mode for local testing")
    parser.add_argument(
        "--remote",
        action="store_true",
        help="Run in remote mode (HTTP on all interfaces)",
    )
    parser.add_argument("--port", type=int, help=f"Port number for HTTP server (default {DEFAULT_HTTP_PORT})")
    parser.add_argument("--log-level", help="Logging level (default INFO)")
    return parser


def _env_flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() == "true"


def get_server_config(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServerConfig:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.env:
        env_path = Path(args.env).resolve()
        env_source: Literal["cli", "default"] = "cli"
    else:
        env_path = Path.cwd() / ".env"
        env_source = "default"
    load_dotenv(env_path, override=bool(args.env))

    env = os.environ if environ is None else environ
    config = ServerConfig(env_file=str(env_path))
    config.config_sources.env_file = env_source

    if args.stdio:
        config.is_stdio_mode = True
        config.config_sources.stdio = "cli"
    elif _env_flag(env, "STDIO_MODE"):
        config.is_stdio_mode = True
        config.config_sources.stdio = "env"

    if args.http:
        config.is_http_mode = True
        config.config_sources.http = "cli"
    elif _env_flag(env, "HTTP_MODE"):
        config.is_http_mode = True
        config.config_sources.http = "env"

    # Remote mode implies HTTP mode.
    if args.remote:
        config.is_remote_mode = True
        config.is_http_mode = True
        config.config_sources.remote = "cli"
    elif _env_flag(env, "REMOTE_MODE"):
        config.is_remote_mode = True
        config.is_http_mode = True
        config.config_sources.remote = "env"

    if args.port:
        config.http_port = args.port
        config.config_sources.port = "cli"
    else:
        raw_port = env.get("HTTP_PORT") or env.get("PORT")
        if raw_port:
            try:
                config.http_port = int(raw_port)
            except ValueError:
                parser.error(f"invalid HTTP_PORT/PORT value: {raw_port!r}")
            config.config_sources.port = "env"

    config.log_level = args.log_level or env.get("LOG_LEVEL", "INFO")
    return config


def log_config_sources(config: ServerConfig) -> None:
    """Log where each setting came from. Silent in stdio mode."""
    if config.is_stdio_mode:
        return
    sources = config.config_sources
    log_info(__name__, "ENV_FILE: %s (source: %s)", config.env_file, sources.env_file)
    log_info(__name__, "STDIO_MODE: %s (source: %s)", config.is_stdio_mode, sources.stdio)
    log_info(__name__, "HTTP_MODE: %s (source: %s)", config.is_http_mode, sources.http)
    log_info(__name__, "REMOTE_MODE: %s (source: %s)", config.is_remote_mode, sources.remote)
    if config.is_http_mode:
        log_info(__name__, "HTTP_PORT: %s (source: %s)", config.http_port, sources.port)
