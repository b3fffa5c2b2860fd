# --------------------------------------------------------------
# File: crypto_kdf.py
# Description: Derivación de la clave simétrica de mensajes mediante scrypt.
# --------------------------------------------------------------
"""Funciones de derivación de claves para el cifrado de mensajes."""

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

# Salt fija heredada del formato existente; ver DESIGN.md.
DERIVATION_SALT = b"salt"


def derive_message_key(
    passphrase: str,
    salt: bytes = DERIVATION_SALT,
    *,
    n: int = 2**14,
    r: int = 8,
    p: int = 1,
    outlen: int = 32,
) -> bytes:
    """Deriva la clave AES de mensajes usando scrypt.

    Los costes por defecto coinciden con los de `scryptSync` de Node, de modo
    que los sobres ya almacenados siguen siendo legibles.

    Args:
        passphrase (str): Passphrase configurada en `ENCRYPTION_KEY`.
        salt (bytes): Salt de derivación; por defecto la constante del formato.
        n (int): Factor de coste CPU/memoria (potencia de dos).
        r (int): Tamaño de bloque.
        p (int): Paralelismo.
        outlen (int): Longitud en bytes de la clave resultante.

    Returns:
        bytes: Clave simétrica derivada.

    """

    kdf = Scrypt(salt=salt, length=outlen, n=n, r=r, p=p)
    return kdf.derive(passphrase.encode("utf-8"))
