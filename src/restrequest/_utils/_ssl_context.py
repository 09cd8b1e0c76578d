import os
import ssl
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..models.client_certificate import ClientCertificate


def expand_path(path):
    """Expand environment variables and user home directory in path."""
    if not path:
        return path
    path = os.path.expandvars(path)
    path = os.path.expanduser(path)
    return path


def _default_ssl_context() -> ssl.SSLContext:
    # Try truststore first (system certificates)
    try:
        import truststore

        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        # Fallback to manual certificate configuration
        import certifi

        ssl_cert_file = expand_path(os.environ.get("SSL_CERT_FILE"))
        requests_ca_bundle = expand_path(os.environ.get("REQUESTS_CA_BUNDLE"))
        ssl_cert_dir = expand_path(os.environ.get("SSL_CERT_DIR"))

        return ssl.create_default_context(
            cafile=ssl_cert_file or requests_ca_bundle or certifi.where(),
            capath=ssl_cert_dir,
        )


def create_ssl_context(
    insecure: bool = False,
    client_certificate: Optional["ClientCertificate"] = None,
) -> ssl.SSLContext:
    """Build the SSL context handed to the transport.

    Args:
        insecure: Skip server certificate and hostname verification, e.g. for
            self-signed test servers.
        client_certificate: Certificate presented to servers that require
            mutual TLS.
    """
    context = _default_ssl_context()
    if insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    if client_certificate is not None:
        client_certificate.load_into(context)
    return context
