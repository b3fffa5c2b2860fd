# --------------------------------------------------------------
# File: __init__.py
# Description: Exposición pública del códec de cifrado de mensajes.
# --------------------------------------------------------------
"""Inicializa el paquete `sealcore` y documenta sus módulos principales."""

from sealcore.codec import EncryptionService
from sealcore.errors import AuthenticationFailed, CodecError, MalformedEnvelope, Misconfiguration

__all__ = [
    "AuthenticationFailed",
    "CodecError",
    "EncryptionService",
    "MalformedEnvelope",
    "Misconfiguration",
    "codec",
    "config",
    "crypto_kdf",
    "crypto_sym",
    "messaging",
    "models",
    "password_policy",
    "storage",
]
