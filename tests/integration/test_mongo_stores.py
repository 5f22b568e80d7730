import os
from datetime import date, datetime, timezone
from unittest.mock import MagicMock, patch

import pymongo
import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, PyMongoError

from wellness_engine.adapters.repositories.base import StoreConnectionError, StoreOperationError
from wellness_engine.adapters.repositories.mongo import (
    DatabaseConfig, DatabaseConnection, MongoActivityStore, MongoMessageStore, MongoProfileStore,
    build_stores, ensure_indexes,
)
from wellness_engine.core.models import Activity, WellnessProfile

ACTIVITY_ID = "507f1f77bcf86cd799439011"


@pytest.fixture
def mock_collection():
    return MagicMock()


class TestMongoMessageStore:

    def test_reads_oldest_first_with_limit(self, mock_collection):
        mock_cursor = MagicMock()
        mock_cursor.sort.return_value = mock_cursor
        mock_cursor.limit.return_value = [
            {"user_id": "u1", "content": "I feel great", "is_from_user": True,
             "created_at": datetime(2025, 3, 10, tzinfo=timezone.utc)},
            {"user_id": "u1", "content": "Glad to hear", "is_from_user": False},
        ]
        mock_collection.find.return_value = mock_cursor

        messages = MongoMessageStore(mock_collection, limit=50).list_user_messages("u1")

        mock_collection.find.assert_called_with({"user_id": "u1"})
        mock_cursor.sort.assert_called_with("created_at", pymongo.ASCENDING)
        mock_cursor.limit.assert_called_with(50)
        assert [m.sender for m in messages] == ["user", "assistant"]
        assert messages[0].text == "I feel great"

    def test_limit_from_environment(self, mock_collection):
        with patch.dict(os.environ, {"WELLNESS_MESSAGE_LIMIT": "25"}):
            assert MongoMessageStore(mock_collection).limit == 25

    def test_driver_error_is_wrapped(self, mock_collection):
        mock_collection.find.side_effect = PyMongoError("boom")
        with pytest.raises(StoreOperationError):
            MongoMessageStore(mock_collection).list_user_messages("u1")


class TestMongoActivityStore:

    def test_list_coerces_malformed_streak(self, mock_collection):
        mock_collection.find.return_value = [
            {"_id": ObjectId(ACTIVITY_ID), "user_id": "u1", "title": "Yoga", "streak": "oops",
             "completed": True, "last_completed": "2025-03-11T08:00:00Z"},
        ]
        activities = MongoActivityStore(mock_collection).list_user_activities("u1")

        assert activities[0].streak == 0
        assert activities[0].activity_id == ACTIVITY_ID
        assert activities[0].last_completed == date(2025, 3, 11)

    def test_update_sets_streak_fields(self, mock_collection):
        mock_collection.update_one.return_value = MagicMock(matched_count=1)

        MongoActivityStore(mock_collection).update_activity(ACTIVITY_ID, True, 4, date(2025, 3, 12))

        mock_collection.update_one.assert_called_once_with(
            {"_id": ObjectId(ACTIVITY_ID)},
            {"$set": {"completed": True, "streak": 4, "last_completed": "2025-03-12"}},
        )

    def test_update_unknown_activity(self, mock_collection):
        mock_collection.update_one.return_value = MagicMock(matched_count=0)
        with pytest.raises(StoreOperationError):
            MongoActivityStore(mock_collection).update_activity(ACTIVITY_ID, False, 0, None)

    def test_invalid_id(self, mock_collection):
        with pytest.raises(StoreOperationError):
            MongoActivityStore(mock_collection).get_activity("u1", "not-an-object-id")

    def test_lookup_is_scoped_to_user(self, mock_collection):
        mock_collection.find_one.return_value = None

        assert MongoActivityStore(mock_collection).get_activity("u1", ACTIVITY_ID) is None
        mock_collection.find_one.assert_called_once_with({"_id": ObjectId(ACTIVITY_ID), "user_id": "u1"})

    def test_create_duplicate_title(self, mock_collection):
        mock_collection.insert_one.side_effect = DuplicateKeyError("dup")
        store = MongoActivityStore(mock_collection)
        with pytest.raises(StoreOperationError):
            store.create_activity("u1", Activity("Journaling"))


class TestMongoProfileStore:

    def test_missing_profile_is_none(self, mock_collection):
        mock_collection.find_one.return_value = None
        assert MongoProfileStore(mock_collection).get_profile("u1") is None

    def test_malformed_document_is_coerced(self, mock_collection):
        mock_collection.find_one.return_value = {
            "user_id": "u1", "mood_trends": ["calm"], "common_topics": "work", "wellness_score": 7,
        }

        profile = MongoProfileStore(mock_collection).get_profile("u1")

        assert profile.mood_trends == {}
        assert profile.common_topics == []
        assert profile.wellness_score == 7

    def test_unreadable_document_is_wrapped(self, mock_collection):
        mock_collection.find_one.return_value = {"user_id": "u1"}
        with patch.object(WellnessProfile, "from_dict", side_effect=ValueError("bad document")):
            with pytest.raises(StoreOperationError):
                MongoProfileStore(mock_collection).get_profile("u1")

    def test_create_then_read(self, mock_collection):
        store = MongoProfileStore(mock_collection)
        profile = WellnessProfile(user_id="u1", wellness_score=8, common_topics=["sleep"])

        store.create_profile(profile)
        written = mock_collection.insert_one.call_args[0][0]
        mock_collection.find_one.return_value = dict(written, _id=ObjectId(ACTIVITY_ID))

        assert store.get_profile("u1") == profile

    def test_update_excludes_identity_fields(self, mock_collection):
        mock_collection.find_one_and_update.return_value = {"user_id": "u1", "wellness_score": 6}

        result = MongoProfileStore(mock_collection).update_profile(
            "u1", {"user_id": "u2", "_id": "x", "wellness_score": 6}
        )

        mock_collection.find_one_and_update.assert_called_once_with(
            {"user_id": "u1"},
            {"$set": {"wellness_score": 6}},
            return_document=pymongo.ReturnDocument.AFTER
        )
        assert result.wellness_score == 6

    def test_update_missing_profile(self, mock_collection):
        mock_collection.find_one_and_update.return_value = None
        with pytest.raises(StoreOperationError):
            MongoProfileStore(mock_collection).update_profile("u1", {"wellness_score": 6})

    def test_duplicate_create(self, mock_collection):
        mock_collection.insert_one.side_effect = DuplicateKeyError("dup")
        with pytest.raises(StoreOperationError):
            MongoProfileStore(mock_collection).create_profile(WellnessProfile(user_id="u1"))


class TestConnection:

    def test_missing_uri(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError):
                DatabaseConfig()

    def test_database_name_from_environment(self):
        assert DatabaseConfig().database_name == "wellness_test"

    def test_connection_error_without_uri(self):
        DatabaseConnection()._client = None
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(StoreConnectionError):
                DatabaseConnection().get_client()

    def test_build_stores_uses_collections(self):
        db = MagicMock()
        message_store, activity_store, profile_store = build_stores(db)

        db.__getitem__.assert_any_call("chat_messages")
        db.__getitem__.assert_any_call("user_activities")
        db.__getitem__.assert_any_call("user_analysis")
        assert isinstance(profile_store, MongoProfileStore)

    def test_ensure_indexes_unique_profile(self):
        db = MagicMock()
        ensure_indexes(db)
        db["user_analysis"].create_index.assert_any_call("user_id", unique=True)
