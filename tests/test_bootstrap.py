from unittest.mock import MagicMock

from pymongo.errors import OperationFailure

from app.infrastructure.db.bootstrap import NOTE_VALIDATOR, ensure_collections


def test_creates_collection_with_validator_and_indexes():
    db = MagicMock()
    db.list_collection_names.return_value = []
    ensure_collections(db)
    db.create_collection.assert_called_once_with("notes", validator={"$jsonSchema": NOTE_VALIDATOR})
    names = [c.kwargs["name"] for c in db["notes"].create_index.call_args_list]
    assert names == ["ix_created_desc", "ix_tags"]


def test_existing_collection_gets_collmod_and_failures_do_not_raise():
    db = MagicMock()
    db.list_collection_names.return_value = ["notes"]
    db.command.side_effect = OperationFailure("not authorized")
    db["notes"].create_index.side_effect = OperationFailure("index exists")
    ensure_collections(db)
    assert db.command.call_args.args[0]["collMod"] == "notes"
    db.create_collection.assert_not_called()
