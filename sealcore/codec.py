# --------------------------------------------------------------
# File: codec.py
# Description: Códec autenticado AES-256-GCM para el contenido de mensajes.
# --------------------------------------------------------------
"""Cifra texto en un sobre Base64 autocontenido y lo revierte verificándolo.

Formato del sobre (antes de codificar en Base64)::

    salt (64) || iv (16) || tag (16) || ciphertext (N)

La clave se deriva con scrypt de la passphrase configurada y de la salt fija
``b"salt"``. La salt aleatoria del sobre se guarda pero no participa en la
derivación, igual que en los sobres existentes.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
from typing import Optional, Union

from cryptography.exceptions import InvalidTag

from sealcore.config import Settings, load_settings
from sealcore.crypto_kdf import derive_message_key
from sealcore.crypto_sym import aes_gcm_decrypt_with_key, aes_gcm_encrypt_with_key
from sealcore.errors import AuthenticationFailed, MalformedEnvelope, Misconfiguration
from sealcore.models import IV_LENGTH, SALT_LENGTH, Envelope
from sealcore.password_policy import check_passphrase_strength

__all__ = ["EncryptionService", "KEY_LENGTH"]

logger = logging.getLogger(__name__)

KEY_LENGTH = 32


class EncryptionService:
    """Códec sin estado mutable; una instancia puede compartirse entre hilos.

    Args:
        passphrase (str): Secreto del que se deriva la clave AES-256.
        key_length (int): Longitud de clave esperada; distinta de 32 es un
            error de configuración.

    Raises:
        Misconfiguration: Si la clave derivada no es utilizable por AES-256-GCM.

    """

    def __init__(self, passphrase: str, *, key_length: int = KEY_LENGTH) -> None:
        if key_length != KEY_LENGTH:
            raise Misconfiguration(
                f"AES-256-GCM requiere una clave de {KEY_LENGTH} bytes, no {key_length}."
            )
        # scrypt es costoso a propósito: se deriva una vez por instancia.
        self._key = derive_message_key(passphrase, outlen=key_length)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "EncryptionService":
        """Crea el códec a partir de la configuración del proceso.

        Avisa en el log si la passphrase es la de desarrollo o es débil.
        """

        settings = settings or load_settings()
        if settings.using_default_key:
            logger.warning(
                "ENCRYPTION_KEY no definida: se usa la clave de desarrollo. "
                "No la utilices fuera de un entorno local."
            )
        else:
            ok, reasons, score = check_passphrase_strength(settings.encryption_key)
            if not ok:
                logger.warning(
                    "ENCRYPTION_KEY débil (score=%d/100): %s", score, "; ".join(reasons)
                )
        return cls(settings.encryption_key)

    def encrypt(self, plaintext: str) -> str:
        """Cifra `plaintext` y devuelve el sobre codificado en Base64.

        Args:
            plaintext (str): Texto UTF-8 de cualquier longitud, incluida cero.

        Returns:
            str: Sobre Base64 de ``96 + len(utf8(plaintext))`` bytes decodificados.

        """

        salt = os.urandom(SALT_LENGTH)
        try:
            ciphertext, iv, tag = aes_gcm_encrypt_with_key(
                self._key, plaintext.encode("utf-8"), iv_length=IV_LENGTH
            )
        except ValueError as exc:
            raise Misconfiguration(f"Parámetros de cifrado no válidos: {exc}") from exc

        envelope = Envelope(salt=salt, iv=iv, tag=tag, ciphertext=ciphertext)
        return base64.b64encode(envelope.to_bytes()).decode("ascii")

    def decrypt(self, envelope: Union[str, bytes]) -> str:
        """Descifra un sobre producido por `encrypt` verificando su integridad.

        Args:
            envelope (Union[str, bytes]): Sobre Base64.

        Returns:
            str: Texto original.

        Raises:
            MalformedEnvelope: Base64 inválido, sobre más corto que la cabecera
                o contenido verificado que no es UTF-8.
            AuthenticationFailed: La etiqueta no verifica.

        """

        if not isinstance(envelope, (str, bytes)):
            raise MalformedEnvelope(f"Tipo de sobre no admitido: {type(envelope).__name__}.")
        try:
            raw = base64.b64decode(envelope, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise MalformedEnvelope("El sobre no es Base64 válido.") from exc

        parts = Envelope.from_bytes(raw)
        try:
            plaintext = aes_gcm_decrypt_with_key(self._key, parts.iv, parts.ciphertext, parts.tag)
        except InvalidTag as exc:
            raise AuthenticationFailed(
                "La etiqueta de autenticación no coincide (clave incorrecta o datos alterados)."
            ) from exc
        except ValueError as exc:
            raise Misconfiguration(f"Parámetros de cifrado no válidos: {exc}") from exc

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedEnvelope("El contenido descifrado no es UTF-8.") from exc
