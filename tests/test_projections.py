import unittest
from datetime import datetime, timezone

from playtracker.core.catalog.catalog import Catalog
from playtracker.core.catalog.models import EntryPatch
from playtracker.core.errors import EntryNotFoundError
from playtracker.core.views.projections import DetailProjection, ListProjection

Y2023 = datetime(2023, 6, 15, 12, tzinfo=timezone.utc)
Y2024 = datetime(2024, 6, 15, 12, tzinfo=timezone.utc)


class ListProjectionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = Catalog()
        self.alpha = self.catalog.add("C:/g/Alpha", now=Y2023)
        self.beta = self.catalog.add("C:/g/Beta", now=Y2024)
        self.view = ListProjection(self.catalog)

    def names(self):
        return [e.name for e in self.view.items()]

    def test_no_filters_keeps_insertion_order(self):
        self.assertEqual(["Alpha", "Beta"], self.names())

    def test_text_filter_case_insensitive(self):
        self.view.set_query("al")
        self.assertEqual(["Alpha"], self.names())
        self.view.set_query("BET")
        self.assertEqual(["Beta"], self.names())

    def test_text_filter_matches_custom_name(self):
        self.catalog.edit(self.beta.id, EntryPatch(custom_name="Celeste"))
        self.view.set_query("celes")
        self.assertEqual(["Beta"], self.names())

    def test_year_filter(self):
        self.view.set_year(2024)
        self.assertEqual(["Beta"], self.names())
        self.view.set_year(None)
        self.assertEqual(["Alpha", "Beta"], self.names())

    def test_text_and_year_combined(self):
        self.view.set_query("a")
        self.view.set_year(2023)
        self.assertEqual(["Alpha"], self.names())

    def test_available_years(self):
        self.assertEqual([2023, 2024], self.view.available_years())

    def test_removed_entry_disappears(self):
        self.catalog.remove(self.alpha.id)
        self.assertEqual(["Beta"], self.names())

    def test_reflects_tick(self):
        self.catalog.apply_running_set({"Beta"})
        beta = [e for e in self.view.items() if e.name == "Beta"][0]
        self.assertEqual(1, beta.time)
        self.assertTrue(beta.running)


class PaginationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = Catalog()
        for i in range(40):
            self.catalog.add(f"C:/g/game{i:02d}.exe", now=Y2024)
        self.view = ListProjection(self.catalog, page_size=15)

    def test_window_grows_by_page(self):
        self.assertEqual(15, len(self.view.items()))
        self.assertTrue(self.view.has_more())
        self.assertEqual(30, self.view.extend())
        self.assertEqual(30, len(self.view.items()))
        self.view.extend()
        self.assertEqual(40, len(self.view.items()))
        self.assertFalse(self.view.has_more())
        self.assertEqual("game00.exe", self.view.items()[0].name)

    def test_filter_change_resets_window(self):
        self.view.extend()
        self.view.set_query("game")
        self.assertEqual(15, self.view.visible_count)
        self.view.extend()
        self.view.set_query("game")
        self.assertEqual(30, self.view.visible_count)
        self.view.set_year(2024)
        self.assertEqual(15, self.view.visible_count)


class DetailProjectionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = Catalog()
        self.alpha = self.catalog.add("C:/g/alpha.exe", now=Y2023)
        self.existing = {"C:/g/alpha.exe"}
        self.detail = DetailProjection(self.catalog, exists=lambda p: p in self.existing)

    def tearDown(self) -> None:
        self.detail.close()

    def test_nothing_selected(self):
        self.assertIsNone(self.detail.current())

    def test_select(self):
        view = self.detail.select(self.alpha.id)
        self.assertEqual("alpha.exe", view.entry.name)
        self.assertTrue(view.file_exists)
        self.assertEqual(self.alpha.id, self.detail.selected_id)

    def test_select_missing(self):
        with self.assertRaises(EntryNotFoundError):
            self.detail.select(12345)
        self.assertIsNone(self.detail.selected_id)

    def test_follows_catalog(self):
        self.detail.select(self.alpha.id)
        self.catalog.apply_running_set({"alpha.exe"})
        self.catalog.apply_running_set({"alpha.exe"})
        view = self.detail.current()
        self.assertEqual(2, view.entry.time)
        self.assertTrue(view.entry.running)
        self.assertEqual("0h 0m 2s", view.play_time)

        self.catalog.apply_running_set(set())
        view = self.detail.current()
        self.assertFalse(view.entry.running)
        self.assertIsNotNone(view.entry.last_played_date)
        self.assertEqual("Recently", view.last_played)

    def test_file_exists_is_live(self):
        self.detail.select(self.alpha.id)
        self.existing.clear()
        self.assertFalse(self.detail.current().file_exists)
        self.assertTrue(self.detail.current().entry.name == "alpha.exe")

    def test_removed_entry_clears_selection(self):
        self.detail.select(self.alpha.id)
        self.catalog.remove(self.alpha.id)
        self.assertIsNone(self.detail.selected_id)
        self.assertIsNone(self.detail.current())

    def test_reload_without_entry_clears_selection(self):
        self.detail.select(self.alpha.id)
        self.catalog.replace_all([])
        self.assertIsNone(self.detail.current())


if __name__ == '__main__':
    unittest.main()
