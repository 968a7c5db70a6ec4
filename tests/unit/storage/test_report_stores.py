# tests/unit/storage/test_report_stores.py — v2
"""Tests for storage/ — memory and JSON report stores share one contract."""

from __future__ import annotations

from datetime import timedelta

import pytest

from soilsense.analysis import fallbacks
from soilsense.config.settings import Settings
from soilsense.core.models import ReportRecord, ReportStatus, Season
from soilsense.storage.base_report_store import PersistenceError, ReportNotFoundError
from soilsense.storage.json_report_store import JsonReportStore
from soilsense.storage.memory_report_store import MemoryReportStore
from soilsense.storage.store_factory import create_report_store


def _id(n: int) -> str:
    return f"{n:032x}"


R1 = _id(1)


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryReportStore()
    return JsonReportStore(tmp_path / "reports")


def _record(clock, report_id=R1, owner="u1", offset_s=0, **kwargs) -> ReportRecord:
    return ReportRecord(
        id=report_id,
        owner_id=owner,
        district="Ludhiana",
        state="Punjab",
        area="Khanna",
        season=Season.RABI,
        file_path=f"/uploads/{report_id}.pdf",
        extracted_text="soil nitrogen crop",
        created_at=clock.now + timedelta(seconds=offset_s),
        **kwargs,
    )


class TestCreateGet:
    @pytest.mark.asyncio
    async def test_roundtrip(self, store, clock):
        await store.create(_record(clock))
        got = await store.get(R1)
        assert got.status == ReportStatus.PENDING
        assert got.season == Season.RABI
        assert got.created_at == clock.now

    @pytest.mark.asyncio
    async def test_duplicate_id(self, store, clock):
        await store.create(_record(clock))
        with pytest.raises(PersistenceError):
            await store.create(_record(clock))

    @pytest.mark.asyncio
    async def test_missing(self, store):
        with pytest.raises(ReportNotFoundError):
            await store.get("nope")


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_with_analysis(self, store, clock):
        await store.create(_record(clock))
        analysis = fallbacks.mock_analysis(Season.RABI)
        updated = await store.update(
            R1, status=ReportStatus.COMPLETED, analysis=analysis, analyzed_at=clock.now
        )
        assert updated.status == ReportStatus.COMPLETED
        got = await store.get(R1)
        assert got.analysis == analysis
        assert got.analyzed_at == clock.now

    @pytest.mark.asyncio
    async def test_unknown_field(self, store, clock):
        await store.create(_record(clock))
        with pytest.raises(PersistenceError, match="Unknown report fields"):
            await store.update(R1, colour="red")

    @pytest.mark.asyncio
    async def test_update_missing(self, store):
        with pytest.raises(ReportNotFoundError):
            await store.update("nope", status=ReportStatus.ANALYZING)

    @pytest.mark.asyncio
    async def test_returned_record_is_a_copy(self, store, clock):
        await store.create(_record(clock))
        got = await store.get(R1)
        got.district = "Changed"
        assert (await store.get(R1)).district == "Ludhiana"


class TestList:
    @pytest.mark.asyncio
    async def test_filters_and_pages_newest_first(self, store, clock):
        for i in range(5):
            await store.create(_record(clock, report_id=_id(i), offset_s=i))
        await store.create(_record(clock, report_id=_id(99), owner="u2", offset_s=10))
        await store.update(_id(4), status=ReportStatus.COMPLETED)

        page, total = await store.list(owner_id="u1", offset=0, limit=2)
        assert total == 5
        assert [r.id for r in page] == [_id(4), _id(3)]

        page, total = await store.list(owner_id="u1", offset=4, limit=2)
        assert [r.id for r in page] == [_id(0)]

        page, total = await store.list(status=ReportStatus.COMPLETED)
        assert total == 1
        assert page[0].id == _id(4)


class TestJsonSpecifics:
    @pytest.mark.asyncio
    async def test_survives_reopen(self, tmp_path, clock):
        await JsonReportStore(tmp_path).create(_record(clock))
        assert (await JsonReportStore(tmp_path).get(R1)).owner_id == "u1"

    @pytest.mark.asyncio
    async def test_corrupt_file(self, tmp_path, clock):
        store = JsonReportStore(tmp_path)
        (tmp_path / f"{_id(7)}.json").write_text("{", encoding="utf-8")
        with pytest.raises(PersistenceError):
            await store.get(_id(7))
        await store.create(_record(clock))
        page, total = await store.list()
        assert total == 1

    @pytest.mark.asyncio
    async def test_file_uses_camel_case(self, tmp_path, clock):
        await JsonReportStore(tmp_path).create(_record(clock))
        text = (tmp_path / f"{R1}.json").read_text(encoding="utf-8")
        assert '"ownerId"' in text

    @pytest.mark.asyncio
    async def test_ids_outside_uuid_hex_never_touch_disk(self, tmp_path, clock):
        root = tmp_path / "reports"
        (tmp_path / "secret.json").write_text("{}", encoding="utf-8")
        store = JsonReportStore(root)
        with pytest.raises(ReportNotFoundError):
            await store.get("../secret")
        with pytest.raises(ReportNotFoundError):
            await store.update("../secret", status=ReportStatus.FAILED)
        with pytest.raises(PersistenceError, match="Invalid report id"):
            await store.create(_record(clock, report_id="../escape"))
        assert not (tmp_path / "escape.json").exists()
        assert list(root.iterdir()) == []


class TestStoreFactory:
    def test_memory(self, settings):
        assert isinstance(create_report_store(settings), MemoryReportStore)

    def test_json(self, tmp_path):
        s = Settings(
            _env_file=None, report_store_backend="json", report_store_root=tmp_path,
            openai_api_key="", anthropic_api_key="",
        )
        assert isinstance(create_report_store(s), JsonReportStore)
