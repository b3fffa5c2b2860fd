# --------------------------------------------------------------
# File: conftest.py
# Description: Fixtures compartidas para aislar configuración y almacenamiento.
# --------------------------------------------------------------

from typing import Iterator

import pytest

from sealcore.codec import EncryptionService

PASSPHRASE_A = "Pr1mera-Clave_de_Pruebas!"
PASSPHRASE_B = "Segunda-Clave_de_Pruebas!2"


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path, monkeypatch) -> Iterator[None]:
    """Aísla STORAGE_PATH y limpia las variables de cifrado en cada prueba.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.
        monkeypatch (pytest.MonkeyPatch): Fixture para ajustar variables de entorno.

    Returns:
        Iterator[None]: Control del fixture autouse durante la ejecución de cada test.
    """
    data_dir = tmp_path / "_data"
    data_dir.mkdir()
    monkeypatch.setenv("STORAGE_PATH", str(data_dir))
    monkeypatch.delenv("ENCRYPTION_KEY", raising=False)
    monkeypatch.delenv("DECRYPT_FAILURE_MODE", raising=False)
    yield


@pytest.fixture(scope="session")
def codec() -> EncryptionService:
    """Códec compartido; scrypt se ejecuta una sola vez por sesión."""
    return EncryptionService(PASSPHRASE_A)


@pytest.fixture(scope="session")
def other_codec() -> EncryptionService:
    """Códec con una passphrase distinta para pruebas de clave incorrecta."""
    return EncryptionService(PASSPHRASE_B)
