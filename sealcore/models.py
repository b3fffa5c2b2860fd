# --------------------------------------------------------------
# File: models.py
# Description: Modelos del sobre cifrado y de los mensajes persistidos.
# --------------------------------------------------------------
"""Modelos Pydantic que encapsulan el formato binario y los registros."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from sealcore.errors import MalformedEnvelope

SALT_LENGTH = 64
IV_LENGTH = 16
TAG_LENGTH = 16
TAG_POSITION = SALT_LENGTH + IV_LENGTH
HEADER_LENGTH = TAG_POSITION + TAG_LENGTH


class Envelope(BaseModel):
    """Sobre producido por una llamada de cifrado.

    El orden en bytes es ``salt || iv || tag || ciphertext``.

    Attributes:
        salt (bytes): 64 bytes aleatorios por llamada.
        iv (bytes): Vector de inicialización de 128 bits.
        tag (bytes): Etiqueta de autenticación AES-GCM.
        ciphertext (bytes): Datos cifrados, misma longitud que el claro.

    """

    salt: bytes = Field(min_length=SALT_LENGTH, max_length=SALT_LENGTH)
    iv: bytes = Field(min_length=IV_LENGTH, max_length=IV_LENGTH)
    tag: bytes = Field(min_length=TAG_LENGTH, max_length=TAG_LENGTH)
    ciphertext: bytes = b""

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Envelope":
        """Separa un sobre binario en sus campos por desplazamientos fijos.

        Raises:
            MalformedEnvelope: Si `raw` no alcanza la cabecera de 96 bytes.

        """

        if len(raw) < HEADER_LENGTH:
            raise MalformedEnvelope(
                f"Sobre demasiado corto: {len(raw)} bytes (mínimo {HEADER_LENGTH})."
            )
        return cls(
            salt=raw[:SALT_LENGTH],
            iv=raw[SALT_LENGTH:TAG_POSITION],
            tag=raw[TAG_POSITION:HEADER_LENGTH],
            ciphertext=raw[HEADER_LENGTH:],
        )

    def to_bytes(self) -> bytes:
        return self.salt + self.iv + self.tag + self.ciphertext


class StoredMessage(BaseModel):
    """Mensaje tal como se guarda en disco.

    `content` contiene el sobre Base64 cuando `encrypted` es verdadero y el
    texto en claro en caso contrario.
    """

    id: str
    conversation: str
    sender_id: str
    receiver_id: Optional[str] = None
    content: str
    encrypted: bool
    created_at: str
    delivered: bool = False
    delivered_at: Optional[str] = None
    read_at: Optional[str] = None


class ConversationSummary(BaseModel):
    """Entrada de la bandeja de conversaciones directas de un usuario.

    Attributes:
        user_id (str): Interlocutor de la conversación.
        last_message (StoredMessage): Último mensaje, ya descifrado.
        last_message_at (str): Marca temporal ISO del último mensaje.
        unread_count (int): Mensajes recibidos aún sin leer.

    """

    user_id: str
    last_message: StoredMessage
    last_message_at: str
    unread_count: int = 0
