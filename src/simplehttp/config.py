"""
=============================================================================
CLIENT CONFIGURATION
=============================================================================

Environment-level options for the HTTP client.

These are the settings that belong to the process or deployment rather than
to a single request: TLS trust tweaks, client certificates, the default
timeout and log verbosity. Per-request settings (target, path, headers,
query params) live on SimpleHttpClient itself.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Explicit ClientConfig(...) passed to SimpleHttpClient          │
    │      └── SimpleHttpClient(ClientConfig(timeout_ms=2000))            │
    │                                                                      │
    │   2. Environment variables via ClientConfig.from_env()              │
    │      └── SIMPLEHTTP_CLIENT_CERT=/etc/pki/me.pem                     │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The client never reads the environment on its own. Opting in to an
environment-driven setup is an explicit ClientConfig.from_env() call.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUE_VALUES


@dataclass
class ClientConfig:
    """
    Configuration for SimpleHttpClient.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    TLS SETTINGS
    - disable_hostname_verification, client_cert, client_key,
      client_key_password, ca_file

    REQUEST DEFAULTS
    - timeout_ms

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # TLS SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    disable_hostname_verification: bool = False
    """
    Accept any hostname in the server certificate of https connections.
    The certificate chain is still verified.
    INSECURE: only for trusted internal or test environments.
    """

    client_cert: Optional[str] = None
    """
    Path to a PEM file with the client certificate (and optionally its key).
    When set, https connections authenticate with this certificate.
    """

    client_key: Optional[str] = None
    """Path to the PEM private key, if not bundled in client_cert."""

    client_key_password: Optional[str] = None
    """Password for an encrypted client_key."""

    ca_file: Optional[str] = None
    """
    PEM bundle of trusted CAs used instead of the system default store.
    Handy for internal CAs and self-signed test servers.
    """

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST DEFAULTS
    # ─────────────────────────────────────────────────────────────────────

    timeout_ms: int = 0
    """
    Default connect/read timeout in milliseconds for new clients.
    0 = no timeout (block forever).
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "WARNING"
    """Logging level used by the command-line interface."""

    @property
    def uses_client_certificate(self) -> bool:
        return bool(self.client_cert)

    @property
    def customizes_tls(self) -> bool:
        """True when https connections need a non-default TLS context."""
        return (
            self.disable_hostname_verification
            or self.uses_client_certificate
            or bool(self.ca_file)
        )

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        SIMPLEHTTP_DISABLE_HOSTNAME_VERIFICATION  "true" to skip hostname checks
        SIMPLEHTTP_CLIENT_CERT                    Client certificate PEM path
        SIMPLEHTTP_CLIENT_KEY                     Client key PEM path
        SIMPLEHTTP_CLIENT_KEY_PASSWORD            Client key password
        SIMPLEHTTP_CA_FILE                        Trusted CA bundle path
        SIMPLEHTTP_TIMEOUT_MS                     Default timeout (default: 0)
        SIMPLEHTTP_LOG_LEVEL                      Logging level (default: WARNING)

        =====================================================================
        """
        return cls(
            disable_hostname_verification=_env_flag(
                "SIMPLEHTTP_DISABLE_HOSTNAME_VERIFICATION"
            ),
            client_cert=os.getenv("SIMPLEHTTP_CLIENT_CERT") or None,
            client_key=os.getenv("SIMPLEHTTP_CLIENT_KEY") or None,
            client_key_password=os.getenv("SIMPLEHTTP_CLIENT_KEY_PASSWORD") or None,
            ca_file=os.getenv("SIMPLEHTTP_CA_FILE") or None,
            timeout_ms=int(os.getenv("SIMPLEHTTP_TIMEOUT_MS", "0")),
            log_level=os.getenv("SIMPLEHTTP_LOG_LEVEL", "WARNING"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by SimpleHttpClient on construction so a bad setup fails
        before the first request rather than in the middle of one.
        """
        if self.timeout_ms < 0:
            raise ValueError(f"timeout_ms must be >= 0, got {self.timeout_ms}")

        if self.client_key and not self.client_cert:
            raise ValueError("client_key requires client_cert")

        for name in ("client_cert", "client_key", "ca_file"):
            path = getattr(self, name)
            if path and not os.path.isfile(path):
                raise ValueError(f"{name} does not exist: {path}")
