import unittest

from translation_extractor.models import (
    ExtractionResult,
    OwnerGroups,
    TranslationEntry,
    TranslationFile
)


class TestOwnerGroups(unittest.TestCase):
    def test_lookup_is_case_insensitive_and_keeps_first_casing(self):
        groups = OwnerGroups()
        groups["Anarchy"] = {"A.One": "1"}
        groups["ANARCHY"] = {"A.Two": "2"}

        self.assertEqual(list(groups), ["Anarchy"])
        self.assertEqual(groups["anarchy"], {"A.Two": "2"})
        self.assertIn("aNaRcHy", groups)
        self.assertEqual(groups.display_name("anarchy"), "Anarchy")

    def test_setdefault_returns_existing_bucket(self):
        groups = OwnerGroups()
        groups.setdefault("FindIt", {})["F.One"] = "1"
        groups.setdefault("findit", {})["F.Two"] = "2"

        self.assertEqual(groups.to_dict(), {"FindIt": {"F.One": "1", "F.Two": "2"}})

    def test_totals(self):
        groups = OwnerGroups({"A": {"K1": "1", "K2": "2"}, "B": {"K2": "x", "K3": "3"}})
        self.assertEqual(len(groups), 2)
        self.assertEqual(groups.total_entries(), 4)
        self.assertEqual(groups.all_keys(), {"K1", "K2", "K3"})

    def test_delete(self):
        groups = OwnerGroups({"A": {"K": "v"}})
        del groups["a"]
        self.assertEqual(len(groups), 0)
        self.assertNotIn("A", groups)
        self.assertNotIn(None, groups)


class TestTranslationFile(unittest.TestCase):
    def test_to_dict_uses_file_field_names(self):
        translation_file = TranslationFile(
            mod_id="Anarchy",
            mod_name="Anarchy",
            version="2026-02-19",
            entries={"Anarchy.Key": TranslationEntry(original="Anarchy", translation="アナーキー")},
        )
        self.assertEqual(translation_file.to_dict(), {
            "modId": "Anarchy",
            "modName": "Anarchy",
            "version": "2026-02-19",
            "entries": {"Anarchy.Key": {"original": "Anarchy", "translation": "アナーキー"}},
        })

    def test_from_dict_tolerates_missing_and_null_fields(self):
        translation_file = TranslationFile.from_dict({
            "entries": {
                "K1": {"original": "one", "translation": None},
                "K2": {"translation": "zwei"},
            }
        })
        self.assertEqual(translation_file.mod_id, "")
        self.assertEqual(translation_file.entries["K1"], TranslationEntry("one", ""))
        self.assertEqual(translation_file.entries["K2"], TranslationEntry("", "zwei"))
        self.assertEqual(translation_file.translated_count(), 1)


class TestExtractionResult(unittest.TestCase):
    def test_success_requires_written_files(self):
        self.assertFalse(ExtractionResult().success)
        self.assertTrue(ExtractionResult(total_owners=1, written_files=("a.json",)).success)
        self.assertFalse(ExtractionResult(written_files=("a.json",), error_message="boom").success)


if __name__ == '__main__':
    unittest.main()
