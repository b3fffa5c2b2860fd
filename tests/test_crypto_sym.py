# --------------------------------------------------------------
# File: test_crypto_sym.py
# Description: Pruebas del cifrado y descifrado simétrico con AES-GCM.
# --------------------------------------------------------------

import os

import pytest
from cryptography.exceptions import InvalidTag

from sealcore.crypto_sym import aes_gcm_decrypt_with_key, aes_gcm_encrypt_with_key


def test_aes_gcm_roundtrip_ok():
    """Comprueba que un cifrado con AES-GCM pueda revertirse correctamente.

    Returns:
        None: Las aserciones evalúan la igualdad entre claro y descifrado.
    """
    key = os.urandom(32)
    plaintext = os.urandom(128)
    ct, iv, tag = aes_gcm_encrypt_with_key(key, plaintext)
    assert len(iv) == 16
    assert len(tag) == 16
    assert len(ct) == len(plaintext)
    assert aes_gcm_decrypt_with_key(key, iv, ct, tag) == plaintext


def test_aes_gcm_custom_iv_length():
    key = os.urandom(32)
    ct, iv, tag = aes_gcm_encrypt_with_key(key, b"msg", iv_length=12)
    assert len(iv) == 12
    assert aes_gcm_decrypt_with_key(key, iv, ct, tag) == b"msg"


def test_aes_gcm_detects_tampering_ciphertext():
    """Verifica que cualquier alteración del ciphertext sea detectada.

    Returns:
        None: La expectativa es `InvalidTag` al descifrar.
    """
    key = os.urandom(32)
    ct, iv, tag = aes_gcm_encrypt_with_key(key, b"hola mundo")
    tampered = bytes([ct[0] ^ 1]) + ct[1:]
    with pytest.raises(InvalidTag):
        aes_gcm_decrypt_with_key(key, iv, tampered, tag)


def test_aes_gcm_detects_tampering_tag():
    """Garantiza que un tag modificado invalide el descifrado.

    Returns:
        None: Se espera `InvalidTag` durante la verificación.
    """
    key = os.urandom(32)
    ct, iv, tag = aes_gcm_encrypt_with_key(key, b"msg")
    bad_tag = bytes([tag[0] ^ 1]) + tag[1:]
    with pytest.raises(InvalidTag):
        aes_gcm_decrypt_with_key(key, iv, ct, bad_tag)


def test_aes_gcm_detects_tampering_iv():
    key = os.urandom(32)
    ct, iv, tag = aes_gcm_encrypt_with_key(key, b"msg")
    bad_iv = bytes([iv[0] ^ 1]) + iv[1:]
    with pytest.raises(InvalidTag):
        aes_gcm_decrypt_with_key(key, bad_iv, ct, tag)


def test_aes_gcm_iv_uniqueness():
    """Evalúa que los IV aleatorios generados no se repitan.

    Returns:
        None: Las aserciones verifican la unicidad dentro del muestreo.
    """
    key = os.urandom(32)
    ivs = set()
    for _ in range(200):
        _, iv, _ = aes_gcm_encrypt_with_key(key, b"x")
        assert iv not in ivs
        ivs.add(iv)


def test_aes_gcm_rejects_bad_key_length():
    with pytest.raises(ValueError):
        aes_gcm_encrypt_with_key(os.urandom(20), b"x")
