# --------------------------------------------------------------
# File: test_crypto_kdf.py
# Description: Pruebas de la derivación scrypt de la clave de mensajes.
# --------------------------------------------------------------

from sealcore.crypto_kdf import DERIVATION_SALT, derive_message_key


def test_derivation_is_deterministic():
    """La misma passphrase con la salt fija produce siempre la misma clave."""
    assert derive_message_key("clave") == derive_message_key("clave")


def test_default_salt_is_literal_salt():
    assert DERIVATION_SALT == b"salt"
    assert derive_message_key("clave") == derive_message_key("clave", b"salt")


def test_key_length_matches_outlen():
    assert len(derive_message_key("clave")) == 32
    assert len(derive_message_key("clave", outlen=16)) == 16


def test_different_inputs_give_different_keys():
    base = derive_message_key("clave")
    assert derive_message_key("clave2") != base
    assert derive_message_key("clave", b"otra-salt") != base


def test_cheap_parameters_for_tests():
    """Los costes son configurables sin cambiar la longitud de la salida."""
    key = derive_message_key("clave", n=2**4, r=1, p=1)
    assert len(key) == 32
    assert key != derive_message_key("clave")
