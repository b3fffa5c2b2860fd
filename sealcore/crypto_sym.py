# --------------------------------------------------------------
# File: crypto_sym.py
# Description: Primitivas AES-GCM con etiqueta separada del ciphertext.
# --------------------------------------------------------------
"""Rutinas de cifrado simétrico para el contenido de los mensajes."""

import os
from typing import Optional, Tuple

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

TAG_LENGTH = 16


def aes_gcm_encrypt_with_key(
    key: bytes,
    plaintext: bytes,
    *,
    iv_length: int = 16,
    aad: Optional[bytes] = None,
) -> Tuple[bytes, bytes, bytes]:
    """Cifra datos con AES-GCM utilizando una clave proporcionada.

    Args:
        key (bytes): Clave simétrica de 128, 192 o 256 bits.
        plaintext (bytes): Datos a cifrar.
        iv_length (int): Longitud del IV aleatorio en bytes.
        aad (Optional[bytes]): Datos autenticados adicionales.

    Returns:
        Tuple[bytes, bytes, bytes]: Ciphertext sin etiqueta, IV y tag.

    """

    iv = os.urandom(iv_length)
    aes = AESGCM(key)
    ct_full = aes.encrypt(iv, plaintext, aad)
    tag = ct_full[-TAG_LENGTH:]
    ciphertext = ct_full[:-TAG_LENGTH]
    return ciphertext, iv, tag


def aes_gcm_decrypt_with_key(
    key: bytes, iv: bytes, ciphertext: bytes, tag: bytes, aad: Optional[bytes] = None
) -> bytes:
    """Descifra datos con AES-GCM verificando la etiqueta de autenticación.

    Args:
        key (bytes): Clave simétrica que protege los datos.
        iv (bytes): Vector de inicialización usado al cifrar.
        ciphertext (bytes): Datos cifrados sin etiqueta.
        tag (bytes): Etiqueta de autenticación de 128 bits.
        aad (Optional[bytes]): Datos autenticados adicionales.

    Returns:
        bytes: Mensaje original en claro.

    Raises:
        cryptography.exceptions.InvalidTag: Si la etiqueta no verifica.

    """

    aes = AESGCM(key)
    return aes.decrypt(iv, ciphertext + tag, aad)
