# --------------------------------------------------------------
# File: password_policy.py
# Description: Reglas de robustez para la passphrase de cifrado del servicio.
# --------------------------------------------------------------
"""Utilidades para evaluar la passphrase configurada en `ENCRYPTION_KEY`."""

from __future__ import annotations

import re
from typing import List, Tuple

from sealcore.config import DEFAULT_ENCRYPTION_KEY

COMMON = {
    "123456",
    "123456789",
    "12345678",
    "qwerty",
    "password",
    "111111",
    "123123",
    "000000",
    "abc123",
    "letmein",
    "secret",
    "changeme",
    "admin",
    "welcome",
    "qwertyuiop",
    "passw0rd",
    "encryption-key",
}

MIN_LENGTH = 12

LOWER = re.compile(r"[a-z]")
UPPER = re.compile(r"[A-Z]")
DIGIT = re.compile(r"\d")
SYMBOL = re.compile(r"[^\w\s]")


def class_count(passphrase: str) -> int:
    """Cuenta los grupos de caracteres presentes en la passphrase."""

    return sum(
        [
            1 if LOWER.search(passphrase) else 0,
            1 if UPPER.search(passphrase) else 0,
            1 if DIGIT.search(passphrase) else 0,
            1 if SYMBOL.search(passphrase) else 0,
        ]
    )


def has_long_repetition(passphrase: str, max_run: int = 3) -> bool:
    """Detecta repeticiones largas de un mismo carácter dentro de la passphrase."""

    pattern = rf"(.)\1{{{max_run},}}"
    return re.search(pattern, passphrase) is not None


def check_passphrase_strength(passphrase: str) -> Tuple[bool, List[str], int]:
    """Evalúa la passphrase y devuelve cumplimiento, motivos y puntuación.

    Args:
        passphrase (str): Valor de `ENCRYPTION_KEY`.

    Returns:
        Tuple[bool, List[str], int]: Resultado de validación, motivos de rechazo y
        puntuación acumulada entre 0 y 100.

    """

    reasons: List[str] = []
    score = 0

    length = len(passphrase)
    if length < MIN_LENGTH:
        reasons.append(f"Longitud mínima {MIN_LENGTH}.")
    else:
        score += min(45, (length - MIN_LENGTH + 1) * 3)

    classes = class_count(passphrase)
    if classes < 3:
        reasons.append("Usa al menos 3 de: minúsculas, mayúsculas, dígitos, símbolos.")
    else:
        score += 30

    is_common = passphrase.lower() in COMMON
    if is_common:
        reasons.append("Passphrase demasiado común.")
    else:
        score += 10

    is_default = passphrase == DEFAULT_ENCRYPTION_KEY
    if is_default:
        reasons.append("Es la clave de desarrollo por defecto.")
    else:
        score += 10

    repeated = has_long_repetition(passphrase)
    if repeated:
        reasons.append("Evita repeticiones largas del mismo carácter.")
    else:
        score += 5

    score = max(0, min(100, score))
    ok = not reasons
    return ok, reasons, score
