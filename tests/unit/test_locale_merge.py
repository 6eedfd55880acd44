import unittest

from translation_extractor.locale_merge import locale_priority, merge_locales, merge_owner_locales


class TestLocalePriority(unittest.TestCase):
    def test_reference_locale(self):
        self.assertEqual(locale_priority("en-US"), 0)
        self.assertEqual(locale_priority("EN-us"), 0)

    def test_same_language(self):
        self.assertEqual(locale_priority("en-GB"), 1)
        self.assertEqual(locale_priority("en"), 1)

    def test_other_language(self):
        self.assertEqual(locale_priority("zh-HANS"), 50)
        self.assertEqual(locale_priority("ja-JP"), 50)

    def test_empty_locale(self):
        self.assertEqual(locale_priority(""), 100)
        self.assertEqual(locale_priority(None), 100)

    def test_custom_reference_locale(self):
        self.assertEqual(locale_priority("de-DE", reference_locale="de-DE"), 0)
        self.assertEqual(locale_priority("de-AT", reference_locale="de-DE"), 1)
        self.assertEqual(locale_priority("en-US", reference_locale="de-DE"), 50)


class TestMergeLocales(unittest.TestCase):
    def test_higher_priority_value_wins(self):
        merged = merge_locales({
            "fr-FR": {"X": "b1", "Y": "b2"},
            "en-US": {"X": "a1"},
        })
        self.assertEqual(merged, {"X": "a1", "Y": "b2"})

    def test_equal_rank_keeps_encounter_order(self):
        merged = merge_locales({
            "de-DE": {"X": "de"},
            "fr-FR": {"X": "fr", "Z": "fr-z"},
        })
        self.assertEqual(merged, {"X": "de", "Z": "fr-z"})

    def test_empty_locale_only_fills_gaps(self):
        merged = merge_locales({
            "": {"X": "none", "W": "none-w"},
            "en-GB": {"X": "gb"},
        })
        self.assertEqual(merged, {"X": "gb", "W": "none-w"})

    def test_merge_owner_locales_drops_empty_owners(self):
        groups = merge_owner_locales({
            "Anarchy": {"en-US": {"A.Key": "a"}},
            "Empty": {"en-US": {}},
        })
        self.assertEqual(groups.to_dict(), {"Anarchy": {"A.Key": "a"}})


if __name__ == '__main__':
    unittest.main()
