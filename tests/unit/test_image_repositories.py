import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import DuplicateKeyError

from src.domain.entities.image import ImageRecord, Variation
from src.domain.errors import ConflictError
from src.infrastructure.database.repositories.base import ImageRepository
from src.infrastructure.database.repositories.json_image_repository import JsonImageRepository
from src.infrastructure.database.repositories.mongo_image_repository import MongoImageRepository


def _record(image_id="abc", variations=()) -> ImageRecord:
    return ImageRecord(
        id=image_id,
        original=Variation(height=1080, width=1920, path=f"images/{image_id}/original.png"),
        variations=tuple(variations),
        uploaded_at=datetime(2024, 5, 1, 12, 30, tzinfo=UTC),
        byte_size=2048,
        content_type="image/png",
    )


class TestJsonImageRepository:
    def test_satisfies_contract(self, repo):
        assert isinstance(repo, ImageRepository)

    @pytest.mark.asyncio
    async def test_insert_then_get(self, repo):
        record = _record()
        await repo.insert(record)
        assert await repo.get("abc") == record
        assert await repo.get("missing") is None

    @pytest.mark.asyncio
    async def test_insert_conflict(self, repo):
        await repo.insert(_record())
        with pytest.raises(ConflictError):
            await repo.insert(_record())

    @pytest.mark.asyncio
    async def test_update_replaces_record(self, repo):
        await repo.insert(_record())
        updated = _record().with_variation(Variation(height=720, width=1280, path="images/abc/720px.png"))
        await repo.update(updated)
        stored = await repo.get("abc")
        assert [v.height for v in stored.variations] == [720]

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, repo):
        await repo.insert(_record())
        await repo.delete("abc")
        await repo.delete("abc")
        assert await repo.get("abc") is None

    @pytest.mark.asyncio
    async def test_snapshot_survives_reload(self, base_path, repo):
        record = _record(variations=[Variation(height=160, width=284, path="images/abc/160px.png")])
        await repo.insert(record)
        await repo.insert(_record("def"))
        await repo.delete("def")

        reloaded = JsonImageRepository(base_path)
        assert await reloaded.get("abc") == record
        assert await reloaded.get("def") is None

    @pytest.mark.asyncio
    async def test_snapshot_format(self, base_path, repo):
        await repo.insert(_record())
        data = json.loads((base_path / "images.json").read_text())
        assert list(data) == ["abc"]
        assert data["abc"]["original"] == {"height": 1080, "width": 1920, "path": "images/abc/original.png"}
        assert data["abc"]["uploaded_at"] == "2024-05-01T12:30:00+00:00"
        assert not (base_path / "images.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_failed_write_keeps_previous_state(self, base_path, repo):
        original = _record()
        await repo.insert(original)
        updated = original.with_variation(Variation(height=720, width=1280, path="images/abc/720px.png"))

        with patch.object(repo, "_save_to_disk", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                await repo.insert(_record("def"))
            with pytest.raises(OSError):
                await repo.update(updated)
            with pytest.raises(OSError):
                await repo.delete("abc")

        assert await repo.get("def") is None
        assert await repo.get("abc") == original
        assert await JsonImageRepository(base_path).get("abc") == original

    def test_empty_file_loads_as_empty_store(self, base_path):
        (base_path / "images.json").write_text("")
        assert JsonImageRepository(base_path)._images == {}


class TestMongoImageRepository:
    @pytest.fixture()
    def collection(self):
        coll = MagicMock()
        coll.insert_one = AsyncMock()
        coll.find_one = AsyncMock(return_value=None)
        coll.replace_one = AsyncMock()
        coll.delete_one = AsyncMock()
        return coll

    def test_from_database_uses_images_collection(self, collection):
        database = {"Images": collection}
        assert MongoImageRepository.from_database(database).collection is collection

    @pytest.mark.asyncio
    async def test_insert_uses_id_as_primary_key(self, collection):
        await MongoImageRepository(collection).insert(_record())
        doc = collection.insert_one.call_args[0][0]
        assert doc["_id"] == "abc"
        assert "id" not in doc
        assert doc["uploaded_at"] == datetime(2024, 5, 1, 12, 30, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_insert_duplicate_raises_conflict(self, collection):
        collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        with pytest.raises(ConflictError):
            await MongoImageRepository(collection).insert(_record())

    @pytest.mark.asyncio
    async def test_get_round_trips_document(self, collection):
        repo = MongoImageRepository(collection)
        record = _record(variations=[Variation(height=480, width=853, path="images/abc/480px.png")])
        collection.find_one.return_value = repo._to_document(record)

        assert await repo.get("abc") == record
        collection.find_one.assert_awaited_once_with({"_id": "abc"})

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, collection):
        assert await MongoImageRepository(collection).get("nope") is None

    @pytest.mark.asyncio
    async def test_update_is_full_replace(self, collection):
        await MongoImageRepository(collection).update(_record())
        filt, doc = collection.replace_one.call_args[0]
        assert filt == {"_id": "abc"}
        assert doc["content_type"] == "image/png"

    @pytest.mark.asyncio
    async def test_delete(self, collection):
        await MongoImageRepository(collection).delete("abc")
        collection.delete_one.assert_awaited_once_with({"_id": "abc"})
