# --------------------------------------------------------------
# File: storage.py
# Description: Persistencia JSON atómica para la base de mensajes.
# --------------------------------------------------------------
"""Funciones auxiliares de entrada/salida para el almacenamiento local."""

from __future__ import annotations

import copy
import json
import os
import tempfile
from typing import Any, Dict

__all__ = ["load_db", "save_db"]

_DEFAULT_DB: Dict[str, Any] = {"direct": [], "groups": {}}


def _ensure_parent_dir(path: str) -> None:
    """Garantiza que exista el directorio padre del archivo de destino."""

    parent = os.path.dirname(path) or "."
    os.makedirs(parent, exist_ok=True)


def load_db(path: str) -> Dict[str, Any]:
    """Carga la base de mensajes o devuelve la estructura vacía.

    Args:
        path (str): Ruta del archivo JSON de mensajes.

    Returns:
        Dict[str, Any]: Estructura cargada o la base vacía si no es accesible.

    """

    try:
        with open(path, "r", encoding="utf-8") as handler:
            db = json.load(handler)
    except (FileNotFoundError, json.JSONDecodeError):
        return copy.deepcopy(_DEFAULT_DB)
    if not isinstance(db, dict):
        return copy.deepcopy(_DEFAULT_DB)
    for key, value in _DEFAULT_DB.items():
        db.setdefault(key, copy.deepcopy(value))
    return db


def save_db(db: Dict[str, Any], path: str) -> None:
    """Guarda la base de datos JSON aplicando escritura atómica.

    Cada llamada escribe en su propio temporal del mismo directorio, de modo
    que dos escrituras simultáneas nunca comparten archivo intermedio.
    """

    _ensure_parent_dir(path)
    parent = os.path.dirname(path) or "."
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=parent, prefix=".messages-", suffix=".tmp", delete=False
    ) as handler:
        json.dump(db, handler, indent=2, ensure_ascii=False)
        tmp_path = handler.name
    try:
        os.replace(tmp_path, path)
    except OSError:
        os.unlink(tmp_path)
        raise
