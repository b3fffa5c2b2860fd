# --------------------------------------------------------------
# File: messaging.py
# Description: Almacén de mensajes directos y de grupo cifrados en reposo.
# --------------------------------------------------------------
"""Operaciones de envío y lectura de mensajes sobre el códec de cifrado."""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import UTC, datetime
from typing import Any, Dict, List

from sealcore.codec import EncryptionService
from sealcore.config import DECRYPT_FAILURE_MODES, Settings, load_settings
from sealcore.errors import CodecError
from sealcore.models import ConversationSummary, StoredMessage
from sealcore.storage import load_db, save_db

__all__ = ["MessageStore", "UNREADABLE_PLACEHOLDER"]

logger = logging.getLogger(__name__)

UNREADABLE_PLACEHOLDER = "[mensaje no descifrable]"


def _conversation_key(user_a: str, user_b: str) -> str:
    """Clave estable de la conversación entre dos usuarios, sin importar el orden."""

    first, second = sorted((user_a, user_b))
    return f"dm:{first}:{second}"


def _now() -> str:
    return datetime.now(UTC).isoformat()


class MessageStore:
    """Persiste mensajes guardando el sobre cifrado junto al indicador `encrypted`.

    Args:
        codec (EncryptionService): Códec usado para cifrar y descifrar contenido.
        path (str): Ruta del archivo JSON de mensajes.
        on_decrypt_error (str): ``raise`` propaga el error del códec;
            ``placeholder`` sustituye el contenido por `UNREADABLE_PLACEHOLDER`;
            ``passthrough`` devuelve el sobre tal cual.

    Las escrituras de una misma instancia se serializan con un lock; varias
    instancias o procesos sobre el mismo archivo no se coordinan entre sí y
    pueden perder mensajes enviados a la vez.

    """

    def __init__(self, codec: EncryptionService, path: str, *, on_decrypt_error: str = "raise") -> None:
        if on_decrypt_error not in DECRYPT_FAILURE_MODES:
            raise ValueError(f"Modo de fallo de descifrado desconocido: {on_decrypt_error!r}")
        self.codec = codec
        self.path = path
        self.on_decrypt_error = on_decrypt_error
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "MessageStore":
        settings = settings or load_settings()
        return cls(
            EncryptionService.from_settings(settings),
            settings.messages_path,
            on_decrypt_error=settings.decrypt_failure_mode,
        )

    # ==================== Mensajes directos ====================

    def send_direct_message(
        self, sender_id: str, receiver_id: str, content: str, encrypted: bool = True
    ) -> StoredMessage:
        """Guarda un mensaje directo, cifrándolo si `encrypted` es verdadero.

        Returns:
            StoredMessage: Registro tal como quedó persistido.

        Raises:
            ValueError: Si el contenido está vacío o emisor y receptor coinciden.

        """

        if sender_id == receiver_id:
            raise ValueError("No puedes enviarte mensajes a ti mismo.")
        message = self._build(
            _conversation_key(sender_id, receiver_id), sender_id, content, encrypted, receiver_id
        )
        with self._lock:
            db = load_db(self.path)
            db["direct"].append(message.model_dump())
            save_db(db, self.path)
        return message

    def get_conversation(self, user_id: str, other_user_id: str, limit: int = 50) -> List[StoredMessage]:
        """Devuelve los últimos `limit` mensajes entre dos usuarios en orden cronológico."""

        key = _conversation_key(user_id, other_user_id)
        db = load_db(self.path)
        records = [record for record in db["direct"] if record["conversation"] == key]
        return [self._reveal(record) for record in self._tail(records, limit)]

    def mark_message_as_read(self, message_id: str, user_id: str) -> StoredMessage:
        """Marca un mensaje directo como leído por su receptor.

        Raises:
            LookupError: Si el mensaje no existe.
            PermissionError: Si `user_id` no es el receptor.

        """

        return self._stamp_direct(message_id, user_id, "leído", "read_at")

    def mark_message_as_delivered(self, message_id: str, user_id: str) -> StoredMessage:
        """Marca un mensaje directo como entregado a su receptor.

        Raises:
            LookupError: Si el mensaje no existe.
            PermissionError: Si `user_id` no es el receptor.

        """

        return self._stamp_direct(message_id, user_id, "entregado", "delivered_at", delivered=True)

    def list_conversations(self, user_id: str) -> List[ConversationSummary]:
        """Bandeja de conversaciones directas de `user_id`, la más reciente primero.

        El último mensaje pasa por la misma política de descifrado que
        `get_conversation`, nunca se expone el sobre salvo en ``passthrough``.
        """

        db = load_db(self.path)
        latest: Dict[str, Dict[str, Any]] = {}
        position: Dict[str, int] = {}
        unread: Dict[str, int] = {}
        for index, record in enumerate(db["direct"]):
            if record["sender_id"] == user_id:
                other = record.get("receiver_id")
            elif record.get("receiver_id") == user_id:
                other = record["sender_id"]
                if record.get("read_at") is None:
                    unread[other] = unread.get(other, 0) + 1
            else:
                continue
            # Los registros se guardan en orden de envío.
            latest[other] = record
            position[other] = index

        ordered = sorted(
            latest,
            key=lambda other: (latest[other]["created_at"], position[other]),
            reverse=True,
        )
        return [
            ConversationSummary(
                user_id=other,
                last_message=self._reveal(latest[other]),
                last_message_at=latest[other]["created_at"],
                unread_count=unread.get(other, 0),
            )
            for other in ordered
        ]

    # ==================== Mensajes de grupo ====================

    def send_group_message(
        self, group_id: str, user_id: str, content: str, encrypted: bool = True
    ) -> StoredMessage:
        message = self._build(f"group:{group_id}", user_id, content, encrypted)
        with self._lock:
            db = load_db(self.path)
            db["groups"].setdefault(group_id, []).append(message.model_dump())
            save_db(db, self.path)
        return message

    def get_group_messages(self, group_id: str, limit: int = 50) -> List[StoredMessage]:
        db = load_db(self.path)
        records = db["groups"].get(group_id, [])
        return [self._reveal(record) for record in self._tail(records, limit)]

    # ==================== Auxiliares ====================

    def _build(
        self,
        conversation: str,
        sender_id: str,
        content: str,
        encrypted: bool,
        receiver_id: str | None = None,
    ) -> StoredMessage:
        if not content:
            raise ValueError("El contenido del mensaje es obligatorio.")
        return StoredMessage(
            id=uuid.uuid4().hex,
            conversation=conversation,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=self.codec.encrypt(content) if encrypted else content,
            encrypted=encrypted,
            created_at=_now(),
        )

    def _stamp_direct(
        self, message_id: str, user_id: str, action: str, field: str, **extra: Any
    ) -> StoredMessage:
        with self._lock:
            db = load_db(self.path)
            for record in db["direct"]:
                if record["id"] != message_id:
                    continue
                if record.get("receiver_id") != user_id:
                    raise PermissionError(
                        f"Solo el receptor puede marcar el mensaje como {action}."
                    )
                record.update(extra)
                record[field] = record.get(field) or _now()
                save_db(db, self.path)
                return StoredMessage(**record)
        raise LookupError(f"Mensaje no encontrado: {message_id}")

    @staticmethod
    def _tail(records: List[Dict[str, Any]], limit: int) -> List[Dict[str, Any]]:
        if limit <= 0:
            return []
        return records[-limit:]

    def _reveal(self, record: Dict[str, Any]) -> StoredMessage:
        """Devuelve el mensaje con el contenido en claro según la política de fallo."""

        message = StoredMessage(**record)
        if not message.encrypted:
            return message
        try:
            content = self.codec.decrypt(message.content)
        except CodecError as exc:
            if self.on_decrypt_error == "raise":
                raise
            logger.warning("No se pudo descifrar el mensaje %s: %s", message.id, exc)
            if self.on_decrypt_error == "placeholder":
                content = UNREADABLE_PLACEHOLDER
            else:
                return message
        return message.model_copy(update={"content": content})
