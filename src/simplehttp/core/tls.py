"""
=============================================================================
TLS CONTEXT CONSTRUCTION
=============================================================================

Builds the ssl.SSLContext used for https connections from a ClientConfig.

    ┌─────────────────────────────────────────────────────────────────────┐
    │  ClientConfig option              Effect on the context             │
    ├─────────────────────────────────────────────────────────────────────┤
    │  (none)                           None → transport default context  │
    │  ca_file                          trust only this CA bundle         │
    │  client_cert / client_key         present client cert (mutual TLS)  │
    │  disable_hostname_verification    check_hostname = False (INSECURE) │
    └─────────────────────────────────────────────────────────────────────┘

Disabling hostname verification still validates the certificate chain;
only the "does this certificate belong to the host I dialled" check is
skipped. That is enough to talk to an internal service by IP address or
through an alias, and not something to ship to untrusted networks.

=============================================================================
"""

import logging
import ssl
from typing import Optional

from ..config import ClientConfig


logger = logging.getLogger(__name__)


def trust_all_hostnames(context: ssl.SSLContext) -> ssl.SSLContext:
    """Turn off hostname checking on context. INSECURE."""
    context.check_hostname = False
    return context


def create_ssl_context(config: ClientConfig) -> Optional[ssl.SSLContext]:
    """
    Create the TLS context for https connections.

    Returns:
        A configured SSLContext, or None when the config asks for nothing
        beyond the platform defaults.
    """
    if not config.customizes_tls:
        return None

    context = ssl.create_default_context(cafile=config.ca_file)

    if config.uses_client_certificate:
        context.load_cert_chain(
            certfile=config.client_cert,
            keyfile=config.client_key,
            password=config.client_key_password,
        )
        logger.debug(f"Loaded client certificate from {config.client_cert}")

    if config.disable_hostname_verification:
        trust_all_hostnames(context)
        logger.debug("Hostname verification disabled for https connections")

    return context
