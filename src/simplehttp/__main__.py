"""
=============================================================================
SIMPLEHTTP CLI ENTRY POINT
=============================================================================

Send one request from the command line and write the body to stdout.

=============================================================================
USAGE
=============================================================================

    # GET a resource
    python -m simplehttp http://localhost:8080/api/health

    # Extra path segments and query params
    python -m simplehttp http://localhost:8080 -p api -p users -q page=2

    # POST a JSON document with basic auth
    python -m simplehttp https://api.example.com/users -X POST \\
        -H "Content-Type: application/json" -u alice:secret \\
        -d '{"name": "bob"}'

    # Internal service with a self-signed cert and a client certificate
    python -m simplehttp https://10.0.0.5:8443/status --insecure \\
        --ca-file ca.pem --cert client.pem --key client.key

    # Show the status line (on stderr) and debug logs
    python -m simplehttp http://localhost:8080 -i --log-level DEBUG

Exit status is 0 for a 2xx/3xx response and 1 otherwise.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

from . import __version__
from .client import SimpleHttpClient
from .config import ClientConfig
from .http.entity import BytesEntityWriter
from .logging_utils import configure_logging


def _split_header(raw: str) -> Tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Header must look like 'Name: value', got {raw!r}")
    return name.strip(), value.strip()


def _split_param(raw: str) -> Tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Query param must look like 'key=value', got {raw!r}")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simplehttp",
        description="Send one HTTP request and write the response body to stdout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  simplehttp http://localhost:8080/health
  simplehttp http://localhost:8080 -p api -p users -q page=2
  simplehttp http://localhost:8080/users -X POST -d '{"name": "bob"}'
  simplehttp https://10.0.0.5:8443/status --insecure
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("url", help="Request URL, e.g. http://localhost:8080/api")

    parser.add_argument(
        "--request", "-X",
        dest="method",
        choices=["GET", "POST", "PUT", "DELETE"],
        type=str.upper,
        default=None,
        help="HTTP method (default: GET, or POST when a body is given)",
    )

    parser.add_argument(
        "--path", "-p",
        action="append",
        default=[],
        help="Path segment appended to the URL (repeatable)",
    )

    parser.add_argument(
        "--header", "-H",
        action="append",
        type=_split_header,
        default=[],
        help="Request header 'Name: value' (repeatable)",
    )

    parser.add_argument(
        "--query", "-q",
        action="append",
        type=_split_param,
        default=[],
        help="Query parameter 'key=value' (repeatable, one value per key)",
    )

    parser.add_argument(
        "--user", "-u",
        default=None,
        help="Basic auth credentials 'user:pass'",
    )

    body = parser.add_mutually_exclusive_group()
    body.add_argument("--data", "-d", default=None, help="Request body (UTF-8 text)")
    body.add_argument("--data-file", default=None, help="Read the request body from this file")

    parser.add_argument(
        "--timeout", "-t",
        type=int,
        default=None,
        help="Connect/read timeout in ms (default: SIMPLEHTTP_TIMEOUT_MS or none)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # TLS ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--insecure", "-k",
        action="store_true",
        help="Skip TLS hostname verification (trusted environments only)",
    )
    parser.add_argument("--cert", default=None, help="Client certificate PEM file")
    parser.add_argument("--key", default=None, help="Client private key PEM file")
    parser.add_argument("--ca-file", default=None, help="Trusted CA bundle PEM file")

    # ─────────────────────────────────────────────────────────────────────
    # OUTPUT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--include", "-i",
        action="store_true",
        help="Print the status line and headers to stderr",
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: SIMPLEHTTP_LOG_LEVEL or WARNING)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"simplehttp {__version__}",
    )

    return parser


def build_config(args: argparse.Namespace) -> ClientConfig:
    """Environment settings, overridden by whatever was given on the command line."""
    config = ClientConfig.from_env()

    if args.insecure:
        config.disable_hostname_verification = True
    if args.cert:
        config.client_cert = args.cert
    if args.key:
        config.client_key = args.key
    if args.ca_file:
        config.ca_file = args.ca_file
    if args.timeout is not None:
        config.timeout_ms = args.timeout
    if args.log_level:
        config.log_level = args.log_level

    return config


def build_client(args: argparse.Namespace, config: ClientConfig) -> SimpleHttpClient:
    """Split the URL into target, path and query, then apply the options."""
    parts = urlsplit(args.url)
    client = SimpleHttpClient(config).set_target(f"{parts.scheme}://{parts.netloc}")

    if parts.path:
        client.path(parts.path)
    for segment in args.path:
        client.path(segment)

    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        client.query_param(key, value)
    for key, value in args.query:
        client.query_param(key, value)

    for name, value in args.header:
        client.header(name, value)

    client.set_basic_auth(args.user)
    return client


def _read_body(args: argparse.Namespace) -> Optional[bytes]:
    if args.data is not None:
        return args.data.encode("utf-8")
    if args.data_file is not None:
        with open(args.data_file, "rb") as f:
            return f.read()
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        configure_logging(config.log_level)

        client = build_client(args, config)
        payload = _read_body(args)
        method = args.method or ("POST" if payload is not None else "GET")
        writer = BytesEntityWriter(payload) if payload is not None else None

        if method == "GET":
            response = client.get()
        elif method == "DELETE":
            response = client.delete()
        elif method == "POST":
            response = client.post(writer)
        else:
            response = client.put(writer)

        with response:
            status = response.get_response_code()
            if args.include:
                print(f"HTTP {status} {response.connection.get_response_message()}", file=sys.stderr)
                for name, values in response.get_headers().items():
                    for value in values:
                        print(f"{name}: {value}", file=sys.stderr)
                print(file=sys.stderr)

            response.copy_to_stream(sys.stdout.buffer)
            sys.stdout.flush()

    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0 if status < 400 else 1


# =============================================================================
# ENTRY POINT
# =============================================================================
# Also installed as the "simplehttp" console script

if __name__ == "__main__":
    sys.exit(main())
