"""Repo de la colección de notas (gateway de persistencia sobre MongoDB)."""
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.core.exceptions import NotFoundError, PersistenceError

COLLECTION = "notes"


def _now() -> datetime:
    # BSON guarda milisegundos; truncar aquí para que la respuesta coincida con lo leído después
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _oid(note_id: str) -> ObjectId:
    try:
        return ObjectId(str(note_id))
    except (InvalidId, TypeError):
        raise NotFoundError(f"Note {note_id} not found", {"id": note_id})


def _to_out(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Documento Mongo -> dict plano con `id` (str) en lugar de `_id`."""
    data = dict(doc)
    data["id"] = str(data.pop("_id"))
    data.setdefault("summary", "")
    data.setdefault("tags", [])
    return data


class NoteRepository:
    """create / find_all_ordered / get_by_id / update_by_id / delete_by_id.

    Los errores del driver se reportan como PersistenceError; un id inexistente
    (o mal formado) como NotFoundError.

    Acepta una `db` fija o un `db_provider` que se consulta en cada operación
    (permite reconectar si Mongo no estaba disponible al arrancar).
    """

    def __init__(
        self,
        db: Optional[Database] = None,
        collection: str = COLLECTION,
        *,
        db_provider: Optional[Callable[[], Database]] = None,
    ) -> None:
        if db is None and db_provider is None:
            raise ValueError("NoteRepository needs a db or a db_provider")
        self._name = collection
        self._db_provider = db_provider
        self._fixed: Optional[Collection] = db[collection] if db is not None else None

    @property
    def _collection(self) -> Collection:
        if self._fixed is not None:
            return self._fixed
        try:
            db = self._db_provider()
        except Exception as e:
            raise PersistenceError(f"Database unavailable: {e}") from e
        return db[self._name]

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Inserta la nota con defaults y devuelve el documento creado."""
        now = _now()
        data = dict(fields)
        data.setdefault("summary", "")
        data["tags"] = list(data.get("tags") or [])
        data.setdefault("created_at", now)
        data["updated_at"] = data["created_at"]
        try:
            res = self._collection.insert_one(data)
        except PyMongoError as e:
            raise PersistenceError(f"Insert note failed: {e}") from e
        data["_id"] = res.inserted_id
        return _to_out(data)

    def find_all_ordered(
        self,
        q: Optional[str] = None,
        tag: Optional[str] = None,
        limit: Optional[int] = None,
        skip: int = 0,
    ) -> List[Dict[str, Any]]:
        """Lista notas (más recientes primero) con filtros opcionales.

        q: subcadena sin distinguir mayúsculas, en content o summary
        tag: nota debe contener la etiqueta exacta
        """
        filtro: Dict[str, Any] = {}
        if q:
            rx = {"$regex": re.escape(q), "$options": "i"}
            filtro["$or"] = [{"content": rx}, {"summary": rx}]
        if tag:
            filtro["tags"] = tag
        try:
            cursor = self._collection.find(filtro).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
            if skip:
                cursor = cursor.skip(int(skip))
            if limit:
                cursor = cursor.limit(int(limit))
            return [_to_out(d) for d in cursor]
        except PyMongoError as e:
            raise PersistenceError(f"List notes failed: {e}") from e

    def get_by_id(self, note_id: str) -> Dict[str, Any]:
        oid = _oid(note_id)
        try:
            doc = self._collection.find_one({"_id": oid})
        except PyMongoError as e:
            raise PersistenceError(f"Get note failed: {e}") from e
        if not doc:
            raise NotFoundError(f"Note {note_id} not found", {"id": note_id})
        return _to_out(doc)

    def update_by_id(self, note_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Reemplaza los campos mutables (content/tags) y devuelve la nota actualizada."""
        oid = _oid(note_id)
        patch = {k: v for k, v in fields.items() if k in ("content", "tags") and v is not None}
        patch["updated_at"] = _now()
        try:
            doc = self._collection.find_one_and_update(
                {"_id": oid},
                {"$set": patch},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise PersistenceError(f"Update note failed: {e}") from e
        if not doc:
            raise NotFoundError(f"Note {note_id} not found", {"id": note_id})
        return _to_out(doc)

    def delete_by_id(self, note_id: str) -> None:
        oid = _oid(note_id)
        try:
            res = self._collection.delete_one({"_id": oid})
        except PyMongoError as e:
            raise PersistenceError(f"Delete note failed: {e}") from e
        if res.deleted_count == 0:
            raise NotFoundError(f"Note {note_id} not found", {"id": note_id})
