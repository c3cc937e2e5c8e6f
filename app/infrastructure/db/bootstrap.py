"""
Bootstrap de la base Mongo: define y aplica validadores (JSON Schema) e índices.
Se ejecuta al inicio de la app para asegurar la colección de notas.
No tumba la app si algo falla; deja warnings en casos no críticos.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging
from pymongo.database import Database
from pymongo.errors import PyMongoError
from app.core.config import settings

_log = logging.getLogger("notes.mongo.bootstrap")

NOTE_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["content", "summary", "tags", "created_at"],
    "properties": {
        "content": {"bsonType": "string", "minLength": 1, "maxLength": settings.note_max_chars},
        "summary": {"bsonType": "string"},
        "tags": {"bsonType": "array", "items": {"bsonType": "string"}},
        "created_at": {"bsonType": "date"},
        "updated_at": {"bsonType": "date"},
    },
    "additionalProperties": True,
}


def _collmod_or_create(db: Database, name: str, validator: Dict[str, Any] | None) -> None:
    try:
        if name not in db.list_collection_names():
            if validator:
                db.create_collection(name, validator={"$jsonSchema": validator})
            else:
                db.create_collection(name)
        elif validator:
            db.command({
                "collMod": name,
                "validator": {"$jsonSchema": validator},
                "validationLevel": "moderate",
            })
    except PyMongoError as e:
        # No aborta el arranque; solo deja sin validator estricto.
        _log.warning("No se pudo aplicar validator en '%s': %s", name, e)


def _ensure_indexes(db: Database, name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = db[name]
    for ix in indexes:
        ix = dict(ix)
        keys = ix.pop("keys")
        try:
            coll.create_index(keys, **ix)
        except PyMongoError as e:
            # Ignora fallas de índice (e.g., ya existe con otras opciones)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


def ensure_collections(db: Database) -> None:
    """
    Garantiza la colección de notas, su validador e índices mínimos.
    """
    name = settings.mongo_collection
    _collmod_or_create(db, name, NOTE_VALIDATOR)
    _ensure_indexes(
        db,
        name,
        [
            {"keys": [("created_at", -1), ("_id", -1)], "name": "ix_created_desc"},
            {"keys": [("tags", 1)], "name": "ix_tags"},
        ],
    )
