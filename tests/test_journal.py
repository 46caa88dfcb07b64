"""Tests for the Journal hub: persistence, views and the editor lifecycle."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from lifeline.capture.session import CapturePhase
from lifeline.config import LifelineConfig
from lifeline.datemath import FixedClock
from lifeline.errors import UnknownKeyError
from lifeline.journal import Journal
from lifeline.memory.models import MemoryRecord
from lifeline.storage import BIRTHDATE_KEY, MEMORIES_KEY, InMemoryStore
from lifeline.timeline.index import PeriodStatus
from lifeline.timeline.period import Granularity


@pytest.fixture
def config(tmp_path: Path) -> LifelineConfig:
    return LifelineConfig(data_dir=tmp_path / "data", export_dir=tmp_path / "exports")


@pytest.fixture
def kv() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def journal(config, kv, provider, ticks) -> Journal:
    j = Journal(config, kv, provider=provider, clock=FixedClock(date(2024, 1, 1)), ticks=ticks)
    j.set_birth_date("1990-01-01")
    return j


async def record_clip(journal: Journal, provider, chunk: bytes = b"clip"):
    capture = journal.editor.capture
    await capture.acquire()
    capture.start()
    provider.recorder.emit(chunk)
    return await capture.stop()


class TestProfile:
    def test_stats(self, journal: Journal, kv):
        stats = journal.stats()
        assert stats.weeks_lived == 1774
        assert stats.percentage_lived == 43
        assert stats.weeks_remaining == 2386
        assert kv.get(BIRTHDATE_KEY) == "1990-01-01"

    def test_no_profile(self, config, kv):
        journal = Journal(config, kv)
        assert journal.stats() is None
        assert journal.annual_view() == []

    def test_invalid_birth_date(self, journal: Journal):
        with pytest.raises(ValueError):
            journal.set_birth_date("1990-02-30")

    def test_load(self, config):
        kv = InMemoryStore({
            BIRTHDATE_KEY: "1985-07-04",
            MEMORIES_KEY: [{"date": "2000-01-01", "title": "Y2K"}],
        })
        journal = Journal(config, kv)
        journal.load()
        assert journal.profile.birth_date == date(1985, 7, 4)
        assert journal.memories.get("2000-01-01").title == "Y2K"

    def test_load_ignores_bad_birth_date(self, config):
        journal = Journal(config, InMemoryStore({BIRTHDATE_KEY: "yesterday"}))
        journal.load()
        assert journal.profile is None


class TestViews:
    def test_drill_down(self, journal: Journal):
        journal.save_memory(MemoryRecord(date="2023-03-01", title="Spring"))
        years = journal.view()
        assert years[0].period.year == 1990
        assert years[-1].period.year == 2034

        assert journal.descend(2023)
        months = journal.view()
        assert len(months) == 12
        assert months[2].status is PeriodStatus.HAS_MEMORY

        assert journal.descend("2023-03")
        grid = journal.view()
        # March 1, 2023 was a Wednesday
        assert grid[0][3].period.day == date(2023, 3, 1)
        assert grid[0][3].memory.title == "Spring"

        assert journal.descend("2023-03-01")
        assert journal.navigation.granularity is Granularity.DAILY
        assert journal.view().title == "Spring"

        assert journal.ascend()
        assert journal.navigation.granularity is Granularity.WEEKLY

    def test_daily_view_without_memory(self, journal: Journal):
        for step in (2023, "2023-03", "2023-03-02"):
            journal.descend(step)
        assert journal.view() is None

    def test_setting_birth_date_resets_navigation(self, journal: Journal):
        journal.descend(2023)
        journal.set_birth_date("1991-01-01")
        assert journal.navigation.granularity is Granularity.ANNUAL


class TestEditor:
    def test_new_draft_defaults(self, journal: Journal):
        editor = journal.open_editor("2023-05-05")
        assert editor.draft.date == "2023-05-05"
        assert editor.draft.title == ""
        assert editor.draft.emotion == "happy"
        assert editor.capture.phase is CapturePhase.IDLE

    def test_existing_record_is_copied(self, journal: Journal):
        journal.save_memory(MemoryRecord(date="2023-05-05", title="Original"))
        editor = journal.open_editor("2023-05-05")
        editor.update(title="Edited")
        assert journal.memories.get("2023-05-05").title == "Original"

    def test_update_validates(self, journal: Journal):
        editor = journal.open_editor("2023-05-05")
        with pytest.raises(UnknownKeyError):
            editor.update(emotion="bored")
        editor.update(emotion="grateful", category="people", date="1999-01-01")
        assert editor.draft.date == "2023-05-05"
        assert editor.draft.emotion == "grateful"

    def test_invalid_date(self, journal: Journal):
        with pytest.raises(ValueError):
            journal.open_editor("2023-02-29")

    def test_save_persists(self, journal: Journal, kv):
        editor = journal.open_editor("2023-05-05")
        editor.update(title="Picnic", location="Park")
        stored = journal.save_editor()
        assert stored.title == "Picnic"
        assert journal.editor is None
        assert kv.get(MEMORIES_KEY)[0]["location"] == "Park"

    def test_save_blank_deletes(self, journal: Journal, kv):
        journal.save_memory(MemoryRecord(date="2023-05-05", title="Picnic"))
        editor = journal.open_editor("2023-05-05")
        editor.update(title="")
        assert journal.save_editor() is None
        assert journal.memories.get("2023-05-05") is None
        assert kv.get(MEMORIES_KEY) == []

    def test_save_without_editor(self, journal: Journal):
        assert journal.save_editor() is None

    @pytest.mark.asyncio
    async def test_save_attaches_recording(self, journal: Journal, provider, kv):
        editor = journal.open_editor("2023-05-05")
        editor.update(title="Birthday")
        artifact = await record_clip(journal, provider)

        stored = journal.save_editor()
        assert stored.video is artifact
        assert journal.locators.is_live(artifact.locator)
        assert provider.stream.stopped
        assert kv.get(MEMORIES_KEY)[0]["video"]["size"] == len(b"clipend")

    @pytest.mark.asyncio
    async def test_rerecording_revokes_previous_locator(self, journal: Journal, provider):
        journal.open_editor("2023-05-05").update(title="Birthday")
        first = await record_clip(journal, provider, b"one")
        first_locator = first.locator
        journal.save_editor()

        journal.open_editor("2023-05-05")
        second = await record_clip(journal, provider, b"two")
        journal.save_editor()

        assert not journal.locators.is_live(first_locator)
        assert journal.locators.is_live(second.locator)
        assert journal.locators.live_count == 1
        assert journal.memories.get("2023-05-05").video.data == b"twoend"

    @pytest.mark.asyncio
    async def test_blank_save_with_recording_leaks_nothing(self, journal: Journal, provider):
        journal.open_editor("2023-05-05")
        await record_clip(journal, provider)
        assert journal.save_editor() is None
        assert journal.locators.live_count == 0

    @pytest.mark.asyncio
    async def test_close_mid_recording_releases_device(self, journal: Journal, provider, ticks):
        journal.open_editor("2023-05-05")
        capture = journal.editor.capture
        await capture.acquire()
        capture.start()

        journal.close_editor()
        assert provider.stream.stopped
        assert ticks.active == []
        assert capture.phase is CapturePhase.IDLE
        assert journal.editor is None

    @pytest.mark.asyncio
    async def test_opening_another_editor_tears_down_first(self, journal: Journal, provider):
        journal.open_editor("2023-05-05")
        await record_clip(journal, provider)
        journal.open_editor("2023-05-06")
        assert journal.locators.live_count == 0
        assert journal.editor.draft.date == "2023-05-06"

    @pytest.mark.asyncio
    async def test_shutdown_releases_everything(self, journal: Journal, provider):
        journal.open_editor("2023-05-05")
        await journal.editor.capture.acquire()
        journal.shutdown()
        assert provider.stream.stop_calls == 1
        journal.shutdown()
        assert provider.stream.stop_calls == 1

    @pytest.mark.asyncio
    async def test_clear_video(self, journal: Journal, provider):
        journal.open_editor("2023-05-05").update(title="Birthday")
        artifact = await record_clip(journal, provider)
        locator = artifact.locator
        journal.save_editor()

        journal.open_editor("2023-05-05").clear_video()
        stored = journal.save_editor()
        assert stored.video is None
        assert not journal.locators.is_live(locator)

    def test_no_provider_means_no_capture(self, config, kv):
        journal = Journal(config, kv)
        assert journal.open_editor("2023-05-05").capture is None


class TestReload:
    @pytest.mark.asyncio
    async def test_video_survives_as_placeholder(self, journal: Journal, provider, kv, config):
        journal.open_editor("2023-05-05").update(title="Birthday")
        await record_clip(journal, provider)
        journal.save_editor()

        reloaded = Journal(config, kv)
        reloaded.load()
        video = reloaded.memories.get("2023-05-05").video
        assert video is not None
        assert video.data is None
        assert video.size == len(b"clipend")

    def test_export_memory(self, journal: Journal, config):
        journal.save_memory(MemoryRecord(date="2023-05-05", title="Picnic"))
        path = journal.export_memory("2023-05-05")
        assert path == config.export_dir / "memory-2023-05-05.md"
        assert path.exists()
        assert journal.export_memory("2023-05-06") is None

    def test_import_memory(self, journal: Journal, config, kv):
        journal.save_memory(MemoryRecord(date="2023-05-05", title="Picnic", description="Sandwiches",
                                         emotion="peaceful", location="Park"))
        path = journal.export_memory("2023-05-05")
        journal.delete_memory("2023-05-05")

        stored = journal.import_memory(path)
        assert stored.title == "Picnic"
        assert stored.description == "Sandwiches"
        assert stored.emotion == "peaceful"
        assert kv.get(MEMORIES_KEY)[0]["location"] == "Park"

    @pytest.mark.asyncio
    async def test_import_keeps_existing_video(self, journal: Journal, provider, tmp_path: Path):
        journal.open_editor("2023-05-05").update(title="Birthday")
        await record_clip(journal, provider)
        video = journal.save_editor().video

        path = tmp_path / "edited.md"
        path.write_text("---\ndate: '2023-05-05'\ntitle: Birthday party\n---\nCake.\n", encoding="utf-8")
        stored = journal.import_memory(path)
        assert stored.title == "Birthday party"
        assert stored.description == "Cake."
        assert stored.video is video
        assert journal.locators.is_live(video.locator)

    def test_import_rejects_bad_file(self, journal: Journal, tmp_path: Path):
        path = tmp_path / "bad.md"
        path.write_text("---\ndate: '2023-02-30'\ntitle: Nope\n---\n", encoding="utf-8")
        with pytest.raises(ValueError):
            journal.import_memory(path)
        assert len(journal.memories) == 0
