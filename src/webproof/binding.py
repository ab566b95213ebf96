import base64
import binascii
from typing import Mapping, Optional, Protocol, Union, runtime_checkable

from .config import EXPORTER_HEADER

# Abstraction for session binding extraction


@runtime_checkable
class SessionBindingSource(Protocol):
    def negotiated_binding_material(self) -> Optional[bytes]: ...


class StaticBindingSource:
    """Fixed binding material (offline use and tests)."""

    def __init__(self, material: Union[bytes, str, None]):
        if isinstance(material, str):
            material = material.encode()
        self._material = material

    def negotiated_binding_material(self) -> Optional[bytes]:
        return self._material or None


class CipherSuiteBindingSource:
    """Bind to the negotiated cipher-suite name; None when nothing was negotiated."""

    def __init__(self, cipher_suite: Optional[str]):
        self.cipher_suite = cipher_suite

    def negotiated_binding_material(self) -> Optional[bytes]:
        if not self.cipher_suite:
            return None
        return self.cipher_suite.encode()


class TLSChannelBindingSource:
    """Channel binding read from a live ssl.SSLSocket / ssl.SSLObject."""

    def __init__(self, ssl_object, cb_type: str = "tls-unique"):
        self.ssl_object = ssl_object
        self.cb_type = cb_type

    def negotiated_binding_material(self) -> Optional[bytes]:
        if self.ssl_object is None:
            return None
        try:
            cb = self.ssl_object.get_channel_binding(self.cb_type)
        except (ValueError, OSError):
            return None
        return cb or None


class ExporterHeaderBindingSource:
    """Exported keying material forwarded by a TLS-terminating proxy.

    The proxy places base64 exporter bytes in a request header (default
    x-tls-exporter). Missing or undecodable headers yield None so the
    generator refuses to issue a proof.
    """

    def __init__(self, headers: Mapping[str, str], header: str = EXPORTER_HEADER):
        self.headers_lower = {k.lower(): v for k, v in headers.items()}
        self.header = header.lower()

    def negotiated_binding_material(self) -> Optional[bytes]:
        val = self.headers_lower.get(self.header)
        if not val:
            return None
        val = val.strip()
        if val.startswith(":") and val.endswith(":"):
            val = val[1:-1]
        try:
            raw = base64.b64decode(val, validate=True)
        except (binascii.Error, ValueError):
            return None
        return raw or None


__all__ = [
    "SessionBindingSource",
    "StaticBindingSource",
    "CipherSuiteBindingSource",
    "TLSChannelBindingSource",
    "ExporterHeaderBindingSource",
]
