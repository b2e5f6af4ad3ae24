from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from urllib.parse import urlsplit

import httpx

USAGE = "ratefire [-rate N] [-limit N] [-method M] [-data FILE] <url>"


def parse_positive_float(raw: str, default: float) -> float:
    """Parse a float env var; fall back to default on junk or non-positive values."""
    raw = (raw or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def parse_int(raw: str, default: int) -> int:
    raw = (raw or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Defaults, overridable from the environment
DEFAULT_RATE = parse_int(os.getenv("RATEFIRE_RATE", ""), 1)
DEFAULT_LIMIT = parse_int(os.getenv("RATEFIRE_LIMIT", ""), 0)
DEFAULT_METHOD = os.getenv("RATEFIRE_METHOD", "get").strip() or "get"
DEFAULT_TIMEOUT = parse_positive_float(os.getenv("RATEFIRE_TIMEOUT", ""), 10.0)
LOG_LEVEL = os.getenv("RATEFIRE_LOG_LEVEL", "INFO").strip().upper() or "INFO"


class ConfigError(ValueError):
    """Invalid or missing command-line input."""


@dataclass(frozen=True)
class Config:
    method: str
    uri: str
    rate: int
    limit: int = 0
    username: str | None = None
    password: str | None = None
    body: bytes | None = None
    timeout: float = DEFAULT_TIMEOUT

    @property
    def interval(self) -> float:
        return 1.0 / self.rate

    @property
    def has_auth(self) -> bool:
        return bool(self.username or self.password)


class _Parser(argparse.ArgumentParser):
    # argparse exits with status 2 on bad input; we want ConfigError instead.
    def error(self, message):
        raise ConfigError(message)


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(prog="ratefire", usage=USAGE, description="Fixed-rate HTTP load generator")
    p.add_argument("-rate", "--rate", type=int, default=DEFAULT_RATE, help="Requests per second to send")
    p.add_argument("-limit", "--limit", type=int, default=DEFAULT_LIMIT, help="Stop after N requests (0 = no limit)")
    p.add_argument("-method", "--method", default=DEFAULT_METHOD, help="HTTP method")
    p.add_argument("-data", "--data", default="", help="File holding the request body (required for POST)")
    p.add_argument("-username", "--username", default="", help="Basic auth username")
    p.add_argument("-password", "--password", default="", help="Basic auth password")
    p.add_argument("-timeout", "--timeout", type=float, default=DEFAULT_TIMEOUT, help="Per-request timeout in seconds")
    p.add_argument("uri", help="Target URL, e.g. http://127.0.0.1:8000/api/ping")
    return p


def read_body(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ConfigError(f"Failed to read file {path}: {e.strerror or e}") from e


def _check_uri(uri: str) -> str:
    bad = ConfigError(f"Target must be an http(s) URL, got {uri!r}")
    try:
        parts = urlsplit(uri)
        parts.port  # raises on out-of-range or non-numeric ports
        httpx.URL(uri)
    except (ValueError, httpx.InvalidURL) as e:
        raise bad from e
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise bad
    return uri


def resolve(argv: list[str] | None = None) -> Config:
    """Turn command-line arguments into a validated Config.

    Raises ConfigError for anything that would make the run meaningless:
    - missing or non-http target
    - rate <= 0, limit < 0, timeout <= 0
    - POST without a readable, non-empty -data file
    """
    args = build_parser().parse_args(argv)

    if args.rate <= 0:
        raise ConfigError(f"-rate must be a positive integer, got {args.rate}")
    if args.limit < 0:
        raise ConfigError(f"-limit must not be negative, got {args.limit}")
    if args.timeout <= 0:
        raise ConfigError(f"-timeout must be positive, got {args.timeout}")

    method = args.method.strip().upper()
    if not method:
        raise ConfigError("-method must not be empty")
    uri = _check_uri(args.uri.strip())

    body = None
    if method == "POST":
        if not args.data:
            raise ConfigError("Must provide -data for POST requests")
        body = read_body(args.data)
        if not body:
            raise ConfigError(f"Data file {args.data} is empty")

    return Config(
        method=method,
        uri=uri,
        rate=args.rate,
        limit=args.limit,
        username=args.username or None,
        password=args.password or None,
        body=body,
        timeout=args.timeout,
    )
