# --------------------------------------------------------------
# File: errors.py
# Description: Jerarquía de errores del códec de cifrado de mensajes.
# --------------------------------------------------------------
"""Excepciones que el códec propaga a sus llamadores."""

__all__ = [
    "AuthenticationFailed",
    "CodecError",
    "MalformedEnvelope",
    "Misconfiguration",
]


class CodecError(Exception):
    """Base común de los fallos del códec."""


class MalformedEnvelope(CodecError):
    """El sobre no es Base64 válido o es más corto que la cabecera fija."""


class AuthenticationFailed(CodecError):
    """La etiqueta AES-GCM no verifica: clave incorrecta o datos alterados."""


class Misconfiguration(CodecError):
    """Parámetros de clave o cifrado inválidos; error de entorno, no de entrada."""
