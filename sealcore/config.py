# --------------------------------------------------------------
# File: config.py
# Description: Lectura de la configuración del proceso desde .env y entorno.
# --------------------------------------------------------------
"""Parámetros de configuración para el códec y el almacén de mensajes."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()

# Valor de desarrollo; cualquier despliegue real debe definir ENCRYPTION_KEY.
DEFAULT_ENCRYPTION_KEY = "default-secret-key-change-in-production"
DEFAULT_STORAGE_PATH = "./_data"
DECRYPT_FAILURE_MODES = ("raise", "placeholder", "passthrough")


class Settings(BaseModel):
    """Configuración inmutable leída del entorno.

    Attributes:
        encryption_key (str): Passphrase de la que se deriva la clave AES.
        storage_path (str): Directorio donde se guarda la base de mensajes.
        decrypt_failure_mode (str): Política ante fallos al descifrar mensajes.

    """

    model_config = ConfigDict(frozen=True)

    encryption_key: str
    storage_path: str
    decrypt_failure_mode: str = "raise"

    @property
    def using_default_key(self) -> bool:
        return self.encryption_key == DEFAULT_ENCRYPTION_KEY

    @property
    def messages_path(self) -> str:
        return os.path.join(self.storage_path, "messages.json")


def load_settings() -> Settings:
    """Construye `Settings` a partir del entorno actual.

    Returns:
        Settings: Configuración validada.

    Raises:
        ValueError: Si `DECRYPT_FAILURE_MODE` no es un modo conocido.

    """

    mode = os.getenv("DECRYPT_FAILURE_MODE", "raise").strip().lower()
    if mode not in DECRYPT_FAILURE_MODES:
        raise ValueError(
            f"DECRYPT_FAILURE_MODE desconocido: {mode!r} "
            f"(valores admitidos: {', '.join(DECRYPT_FAILURE_MODES)})"
        )
    return Settings(
        # Una variable vacía cuenta como no definida.
        encryption_key=os.getenv("ENCRYPTION_KEY") or DEFAULT_ENCRYPTION_KEY,
        storage_path=os.getenv("STORAGE_PATH", DEFAULT_STORAGE_PATH),
        decrypt_failure_mode=mode,
    )
