from __future__ import annotations

import copy
import json
import tempfile
import unittest
from pathlib import Path

from ztr.config import ConfigStore, default_config
from ztr.core.errors import PersistenceError


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


class TestConfigLoad(unittest.TestCase):
    def test_missing_file_writes_template(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td) / "userdata"
            store = ConfigStore(home, warnings=[])
            self.assertTrue(home.is_dir())
            self.assertEqual(_read(home / "config.json"), default_config())
            self.assertEqual(store.document, default_config())
            self.assertEqual(store.load(), "loaded")

    def test_partial_file_is_merged_onto_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td)
            (home / "config.json").write_text(
                json.dumps({"darkTheme": True, "export": {"stripTags": True}, "pdf": None, "legacy": 1}),
                encoding="utf-8",
            )
            warnings: list[dict] = []
            store = ConfigStore(home, warnings=warnings)
            self.assertEqual(warnings, [])
            self.assertTrue(store.get("darkTheme"))
            self.assertTrue(store.get("export.stripTags"))
            self.assertEqual(store.get("export.stripLinks"), "full")
            self.assertEqual(store.get("pdf"), default_config()["pdf"])
            self.assertIsNone(store.get("legacy"))

            store.save()
            self.assertNotIn("legacy", _read(home / "config.json"))

    def test_corrupt_file_is_quarantined_and_defaults_used(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td)
            (home / "config.json").write_text("{", encoding="utf-8")
            warnings: list[dict] = []
            store = ConfigStore(home, warnings=warnings)

            self.assertEqual(store.document, default_config())
            self.assertEqual(len(warnings), 1)
            self.assertEqual(warnings[0]["kind"], "parse_error")
            self.assertTrue(warnings[0]["quarantined_to"])
            self.assertTrue(list(home.glob("config.json.corrupt.*")))
            self.assertEqual(_read(home / "config.json"), default_config())

    def test_load_reports_status(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td)
            store = ConfigStore(home, warnings=[])
            (home / "config.json").unlink()
            self.assertEqual(store.load(), "created")
            self.assertEqual(store.load(), "loaded")
            (home / "config.json").write_text("[1, 2]", encoding="utf-8")
            self.assertEqual(store.load(), "recovered")

    def test_type_mismatch_keeps_default_and_warns(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td)
            (home / "config.json").write_text(
                json.dumps({"pdf": "letter", "openPaths": "/x", "snippets": False}),
                encoding="utf-8",
            )
            warnings: list[dict] = []
            store = ConfigStore(home, warnings=warnings)
            self.assertEqual(store.get("pdf"), default_config()["pdf"])
            self.assertEqual(store.get("openPaths"), [])
            self.assertFalse(store.get("snippets"))
            self.assertEqual(sorted(w["key"] for w in warnings), ["openPaths", "pdf"])
            self.assertTrue(all(w["kind"] == "type_mismatch" for w in warnings))

    def test_permissive_mode_accepts_mismatched_scalars(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td)
            (home / "config.json").write_text(json.dumps({"pdf": "letter", "debug": {"on": 1}}), encoding="utf-8")
            warnings: list[dict] = []
            store = ConfigStore(home, warnings=warnings, permissive=True)
            self.assertEqual(warnings, [])
            self.assertEqual(store.get("pdf"), default_config()["pdf"])
            self.assertEqual(store.get("debug"), {"on": 1})

    def test_unreadable_file_that_cannot_be_replaced_raises(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td)
            (home / "config.json").mkdir()
            with self.assertRaises(PersistenceError):
                ConfigStore(home, warnings=[])

    def test_locale_drives_spellcheck_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = ConfigStore(Path(td), locale="de_DE", warnings=[])
            self.assertEqual(store.get("app_lang"), "de_DE")
            self.assertEqual(
                store.get("spellcheck"),
                {"en_US": False, "en_GB": False, "de_DE": True, "fr_FR": False},
            )


class TestConfigSaveRoundTrip(unittest.TestCase):
    def test_save_then_fresh_load_reproduces_document(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td)
            store = ConfigStore(home, warnings=[])
            self.assertTrue(store.set("darkTheme", True))
            self.assertTrue(store.set("pdf", {"fontsize": 11, "mainfont": "Libertinus"}))
            self.assertTrue(store.add_path(td))
            store.save()

            again = ConfigStore(home, warnings=[])
            self.assertEqual(again.document, store.document)

    def test_unserializable_document_raises_persistence_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td)
            store = ConfigStore(home, warnings=[])
            before = (home / "config.json").read_text(encoding="utf-8")
            # Bypass set() to simulate a caller poking the live document.
            store.document["pandoc"] = Path("/usr/bin/pandoc")
            with self.assertRaises(PersistenceError):
                store.save()
            self.assertEqual((home / "config.json").read_text(encoding="utf-8"), before)

    def test_save_failure_raises_persistence_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td)
            store = ConfigStore(home, warnings=[])
            (home / "config.json").unlink()
            (home / "config.json").mkdir()
            with self.assertRaises(PersistenceError):
                store.save()


class TestConfigGetSet(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.store = ConfigStore(Path(self._td.name), warnings=[])

    def tearDown(self) -> None:
        self._td.cleanup()

    def test_get_plain_and_dotted(self) -> None:
        self.assertEqual(self.store.get("pandoc"), "pandoc")
        self.assertFalse(self.store.get("export.stripTags"))
        self.assertEqual(self.store.get("pdf.fontsize"), 12)
        self.assertIs(self.store.get(), self.store.document)

    def test_get_missing_returns_default(self) -> None:
        self.assertIsNone(self.store.get("nope"))
        self.assertIsNone(self.store.get("export.nope"))
        self.assertIsNone(self.store.get("darkTheme.deeper"))
        self.assertEqual(self.store.get("nope", default="fallback"), "fallback")

    def test_set_unknown_key_fails_without_change(self) -> None:
        before = copy.deepcopy(self.store.document)
        self.assertFalse(self.store.set("nonexistentKey", 1))
        self.assertEqual(self.store.document, before)

    def test_set_known_scalar(self) -> None:
        self.assertTrue(self.store.set("combinerState", "expanded"))
        self.assertEqual(self.store.get("combinerState"), "expanded")

    def test_set_rejects_shape_mismatch_and_none(self) -> None:
        before = copy.deepcopy(self.store.document)
        self.assertFalse(self.store.set("pdf", "letter"))
        self.assertFalse(self.store.set("openPaths", "/tmp"))
        self.assertFalse(self.store.set("darkTheme", None))
        self.assertFalse(self.store.set("pdf", {"fontsize": 10, "mainfont": {"bad": 1}}))
        self.assertEqual(self.store.document, before)

    def test_set_rejects_values_json_cannot_hold(self) -> None:
        before = copy.deepcopy(self.store.document)
        self.assertFalse(self.store.set("pandoc", Path("/usr/bin/pandoc")))
        self.assertFalse(self.store.set("attachmentExtensions", [".md", Path(".txt")]))
        self.assertFalse(self.store.set("export", {"dir": Path("/out")}))
        self.assertFalse(self.store.set("debug", {1, 2}))
        self.assertEqual(self.store.document, before)
        self.store.save()
        self.assertEqual(_read(Path(self._td.name) / "config.json"), before)

    def test_set_copies_the_callers_value(self) -> None:
        mine = [".pdf", ".md"]
        self.assertTrue(self.store.set("attachmentExtensions", mine))
        mine.append(".exe")
        self.assertEqual(self.store.get("attachmentExtensions"), [".pdf", ".md"])
        self.assertFalse(self.store.is_attachment("setup.exe"))

    def test_set_object_merges_nested_defaults(self) -> None:
        self.assertTrue(self.store.set("export", {"stripIDs": False, "unknown": 1}))
        self.assertEqual(
            self.store.get("export"),
            {"dir": "temp", "stripIDs": False, "stripTags": False, "stripLinks": "full"},
        )

    def test_is_attachment(self) -> None:
        self.assertTrue(self.store.is_attachment("paper.PDF"))
        self.assertTrue(self.store.is_attachment(Path("/x/data.csv")))
        self.assertFalse(self.store.is_attachment("note.md"))
        self.assertFalse(self.store.is_attachment("Makefile"))

    def test_supported_languages(self) -> None:
        self.assertEqual(sorted(ConfigStore.supported_languages()), ["de_DE", "en_GB", "en_US", "fr_FR"])


if __name__ == "__main__":
    unittest.main()
