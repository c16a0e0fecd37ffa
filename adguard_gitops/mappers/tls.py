"""
Encryption settings <-> /control/tls/status and /control/tls/configure.

`certificate_chain` and `private_key` hold either base64 PEM data or a
path on the AdGuard Home host; the wire format has separate keys for both.
"""

import re
from typing import Any, Dict, Optional

from adguard_gitops.constants import KIND_TLS, TLS_FILE_PATH_PATTERN, TLS_UNSET_TIMESTAMP
from adguard_gitops.mappers.fields import (
    bool_field,
    int_field,
    str_field,
    optional_list_field,
    fields_to_remote,
    fields_to_declared,
    build_model,
)
from adguard_gitops.models import TlsConfigModel
from adguard_gitops.quirks import apply_quirks

_FILE_PATH = re.compile(TLS_FILE_PATH_PATTERN)

TLS_FIELDS = (
    bool_field("enabled"),
    str_field("server_name", default=""),
    bool_field("force_https", default=False),
    int_field("port_https"),
    int_field("port_dns_over_tls"),
    int_field("port_dns_over_quic"),
    bool_field("serve_plain_dns"),
)

# Computed by AdGuard Home from the certificate and key
TLS_STATUS_FIELDS = (
    bool_field("private_key_saved", default=False),
    bool_field("valid_cert", default=False),
    bool_field("valid_chain", default=False),
    bool_field("valid_key", default=False),
    bool_field("valid_pair", default=False),
    str_field("key_type", default=""),
    str_field("subject", default=""),
    str_field("issuer", default=""),
    str_field("not_before", default=""),
    str_field("not_after", default=""),
    optional_list_field("dns_names", default=None),
    str_field("warning_validation", default=""),
)

# Declared value -> (PEM key, path key)
MATERIAL = {
    "certificate_chain": ("certificate_chain", "certificate_path"),
    "private_key": ("private_key", "private_key_path"),
}


def is_file_path(value: str) -> bool:
    """
    Tell a file path from base64 PEM data by its first two characters.

    Examples:
        >>> is_file_path("/etc/ssl/cert.pem")
        True
        >>> is_file_path("LS0tLS1CRUdJTi")
        False
    """
    return bool(value) and _FILE_PATH.match(value[:2]) is not None


def tls_to_remote(tls: TlsConfigModel) -> Dict[str, Any]:
    """Build the /control/tls/configure payload."""
    payload = fields_to_remote(tls, TLS_FIELDS, KIND_TLS)
    for name, (pem_key, path_key) in MATERIAL.items():
        value = getattr(tls, name)
        if is_file_path(value):
            payload[pem_key], payload[path_key] = "", value
        else:
            payload[pem_key], payload[path_key] = value, ""
    return payload


def tls_to_declared(remote: Any, prior: Optional[TlsConfigModel] = None,
                    persisted: bool = False) -> TlsConfigModel:
    """
    Map /control/tls/status (or the answer of tls/configure) to a TlsConfigModel.

    Args:
        remote: Status object returned by AdGuard Home
        prior: Prior declared state, if any
        persisted: Persisted read (True) or read-only view (False)
    """
    observed = fields_to_declared(remote, TLS_FIELDS + TLS_STATUS_FIELDS, KIND_TLS)
    for name, (pem_key, path_key) in MATERIAL.items():
        observed[name] = remote.get(pem_key) or remote.get(path_key) or ""
    for name in ("not_before", "not_after"):
        if observed[name] == TLS_UNSET_TIMESTAMP:
            observed[name] = ""
    observed["dns_names"] = observed["dns_names"] or []

    prior_dict = prior.model_dump() if prior is not None else None
    apply_quirks(KIND_TLS, observed, prior_dict, persisted)
    return build_model(TlsConfigModel, observed, KIND_TLS)
