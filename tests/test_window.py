import os
import shutil
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication

from apps.desktop.ui.components import GameListItem
from apps.desktop.ui.window import ALL_YEARS, MainWindow
from playtracker.core.monitor.ticker import ManualTicker
from playtracker.core.tracker import PlaytimeTracker
from playtracker.shared.config import AppConfig


class FixedProbe:
    def running_names(self):
        return set()


class MainWindowTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self) -> None:
        self.tmp = Path(tempfile.mkdtemp(prefix="playtracker_window_"))
        cfg = AppConfig(store_path=str(self.tmp / "store.json"), page_size=15)
        self.tracker = PlaytimeTracker(cfg, probe=FixedProbe(), ticker=ManualTicker())
        self.tracker.load()
        self.window = MainWindow(self.tracker)

    def tearDown(self) -> None:
        self.window.close()
        self.tracker.shutdown()
        shutil.rmtree(self.tmp, ignore_errors=True)

    def rows(self):
        return [self.window.game_list.itemWidget(self.window.game_list.item(i))
                for i in range(self.window.game_list.count())]

    def test_vanished_year_resets_the_filter(self):
        old = self.tracker.catalog.add("C:/g/alpha.exe", now=datetime(2023, 6, 1, 12, tzinfo=timezone.utc))
        self.tracker.catalog.add("C:/g/beta.exe", now=datetime(2024, 6, 1, 12, tzinfo=timezone.utc))
        self.window.year_combo.setCurrentText("2023")
        self.assertEqual(2023, self.tracker.list_view.year)
        self.assertEqual(1, self.window.game_list.count())

        self.tracker.catalog.remove(old.id)

        self.assertEqual(ALL_YEARS, self.window.year_combo.currentText())
        self.assertIsNone(self.tracker.list_view.year)
        self.assertEqual(["beta.exe"], [e.name for e in self.tracker.list_view.items()])
        self.assertEqual(1, self.window.game_list.count())

    def test_scrolling_loads_the_next_page_once(self):
        for i in range(40):
            self.tracker.catalog.add(f"C:/g/game{i:02d}.exe")
        self.window.game_list.setFixedHeight(200)
        self.window.show()
        self.app.processEvents()

        bar = self.window.game_list.verticalScrollBar()
        self.assertGreater(bar.maximum(), 0)
        bar.setValue(bar.maximum())
        self.app.processEvents()

        visible = self.tracker.list_view.visible_count
        self.assertEqual(30, visible)
        rows = self.rows()
        self.assertEqual(visible, len(rows))
        self.assertTrue(all(isinstance(row, GameListItem) for row in rows))


if __name__ == '__main__':
    unittest.main()
