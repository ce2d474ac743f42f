import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from playtracker.core.catalog.models import EntryPatch
from playtracker.core.catalog.store import CatalogStore
from playtracker.core.errors import DuplicateNameError, EntryNotFoundError, LaunchError, StoreIOError
from playtracker.core.monitor.ticker import ManualTicker
from playtracker.core.tracker import PlaytimeTracker
from playtracker.shared.config import AppConfig


class FixedProbe:
    def __init__(self):
        self.names = set()

    def running_names(self):
        return set(self.names)


class PlaytimeTrackerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = Path(tempfile.mkdtemp(prefix="playtracker_tracker_"))
        self.exe = self.tmp / "alpha.exe"
        self.exe.write_bytes(b"stub")
        self.cfg = AppConfig(store_path=str(self.tmp / "store.json"), controller_remap_exe=str(self.exe))
        self.probe = FixedProbe()
        self.ticker = ManualTicker()
        self.tracker = PlaytimeTracker(self.cfg, probe=self.probe, ticker=self.ticker)
        self.tracker.load()

    def tearDown(self) -> None:
        self.tracker.shutdown()
        shutil.rmtree(self.tmp, ignore_errors=True)

    def stored(self):
        return CatalogStore(self.tmp / "store.json").load()

    def test_add_is_durable_on_return(self):
        entry = self.tracker.add_game(str(self.exe))
        self.assertEqual([entry.id], [e.id for e in self.stored()])

    def test_add_duplicate(self):
        self.tracker.add_game(str(self.exe))
        with self.assertRaises(DuplicateNameError):
            self.tracker.add_game(str(self.tmp / "other" / "alpha.exe"))
        self.assertEqual(1, len(self.stored()))

    def test_remove_then_load(self):
        a = self.tracker.add_game(str(self.exe))
        self.tracker.add_game(str(self.tmp / "beta.exe"))
        self.tracker.remove_game(a.id)
        self.assertEqual(["beta.exe"], [e.name for e in self.stored()])

        fresh = PlaytimeTracker(self.cfg, probe=FixedProbe(), ticker=ManualTicker())
        self.assertEqual(1, fresh.load())
        self.assertIsNone(fresh.catalog.find_by_name("alpha.exe"))

    def test_remove_missing(self):
        with self.assertRaises(EntryNotFoundError):
            self.tracker.remove_game(99)

    def test_rename_and_cover(self):
        entry = self.tracker.add_game(str(self.exe))
        self.tracker.rename_and_cover(entry.id, "Alpha", "https://img/a.png")
        [stored] = self.stored()
        self.assertEqual("Alpha", stored.custom_name)
        self.assertEqual("https://img/a.png", stored.cover_url)

        self.tracker.rename_and_cover(entry.id, "", "")
        [stored] = self.stored()
        self.assertIsNone(stored.custom_name)

    def test_save_failure_surfaces_but_keeps_memory(self):
        entry = self.tracker.add_game(str(self.exe))
        with patch.object(self.tracker.store, "save", side_effect=StoreIOError("disk full")):
            with self.assertRaises(StoreIOError):
                self.tracker.edit_game(entry.id, EntryPatch(custom_name="Alpha"))
        self.assertEqual("Alpha", self.tracker.catalog.get(entry.id).custom_name)
        self.assertIsNone(self.stored()[0].custom_name)

    def test_ticks_flow_to_projections_and_store(self):
        entry = self.tracker.add_game(str(self.exe))
        self.tracker.detail_view.select(entry.id)
        self.tracker.start()

        self.probe.names = {"alpha.exe"}
        self.ticker.fire(3)
        self.assertEqual(3, self.tracker.detail_view.current().entry.time)
        self.assertTrue(self.tracker.list_view.items()[0].running)
        self.assertEqual(3, self.stored()[0].time)

        self.probe.names = set()
        self.ticker.fire()
        view = self.tracker.detail_view.current()
        self.assertFalse(view.entry.running)
        self.assertIsNotNone(self.stored()[0].last_played_date)

    def test_remove_clears_every_projection(self):
        entry = self.tracker.add_game(str(self.exe))
        self.tracker.detail_view.select(entry.id)
        self.tracker.remove_game(entry.id)
        self.assertEqual([], self.tracker.list_view.items())
        self.assertIsNone(self.tracker.detail_view.current())

    def test_launch_with_controller_remap(self):
        entry = self.tracker.add_game(str(self.exe))
        self.tracker.set_controller_remap(entry.id, True)
        with patch("playtracker.core.launch.launcher.subprocess.Popen") as popen:
            self.tracker.launch_game(entry.id)
        self.assertEqual(2, popen.call_count)

    def test_launch_missing_executable(self):
        entry = self.tracker.add_game(str(self.exe))
        os.remove(self.exe)
        with self.assertRaises(LaunchError):
            self.tracker.launch_game(entry.id)


if __name__ == '__main__':
    unittest.main()
