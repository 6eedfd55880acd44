import unittest

from translation_extractor.consolidation import (
    consolidate_groups,
    merge_overlapping_groups,
    merge_similar_groups
)
from translation_extractor.models import OwnerGroups


def _keys(prefix, count):
    return {f"{prefix}.Key{i}": f"{prefix} value {i}" for i in range(count)}


class TestMergeSimilarGroups(unittest.TestCase):
    def test_name_variants_collapse_into_largest_group(self):
        groups = OwnerGroups()
        groups["Better_Bulldozer"] = _keys("Small", 3)
        groups["BetterBulldozer"] = _keys("Large", 7)

        result = merge_similar_groups(groups)

        self.assertEqual(list(result), ["BetterBulldozer"])
        self.assertEqual(len(result["BetterBulldozer"]), 10)

    def test_survivor_value_is_not_overwritten(self):
        groups = OwnerGroups()
        groups["better-bulldozer"] = {"Shared.Key": "from small"}
        groups["BetterBulldozer"] = {"Shared.Key": "from large", "Other.Key": "x"}

        result = merge_similar_groups(groups)

        self.assertEqual(result["BetterBulldozer"], {"Shared.Key": "from large", "Other.Key": "x"})

    def test_tie_keeps_first_seen_name(self):
        groups = OwnerGroups()
        groups["Move_It"] = {"A.One": "1"}
        groups["MoveIt"] = {"A.Two": "2"}

        result = merge_similar_groups(groups)

        self.assertEqual(list(result), ["Move_It"])
        self.assertEqual(result["Move_It"], {"A.One": "1", "A.Two": "2"})

    def test_distinct_names_untouched(self):
        groups = OwnerGroups({"Anarchy": {"A.x": "1"}, "FindIt": {"F.x": "2"}})
        self.assertEqual(merge_similar_groups(groups).to_dict(), groups.to_dict())


class TestMergeOverlappingGroups(unittest.TestCase):
    def test_heavy_overlap_merges_smaller_into_larger(self):
        groups = OwnerGroups()
        groups["YY"] = {"K1": "a", "K2": "b"}
        groups["TreeController"] = {"K1": "A", "K2": "B", "K3": "C"}

        result = merge_overlapping_groups(groups)

        self.assertEqual(list(result), ["TreeController"])
        self.assertEqual(result["TreeController"], {"K1": "A", "K2": "B", "K3": "C"})

    def test_light_overlap_keeps_groups_apart(self):
        groups = OwnerGroups()
        groups["First"] = {"K1": "a", "K2": "b", "K3": "c"}
        groups["Second"] = {"K1": "a", "K4": "d", "K5": "e"}

        result = merge_overlapping_groups(groups)

        self.assertEqual(sorted(result), ["First", "Second"])

    def test_equal_size_tie_goes_to_first_listed(self):
        groups = OwnerGroups()
        groups["First"] = {"K1": "first", "K2": "b"}
        groups["Second"] = {"K1": "second", "K3": "c"}

        result = merge_overlapping_groups(groups)

        self.assertEqual(list(result), ["First"])
        self.assertEqual(result["First"], {"K1": "first", "K2": "b", "K3": "c"})

    def test_absorbed_group_takes_no_further_part(self):
        groups = OwnerGroups()
        groups["A"] = {"K1": "a", "K2": "a"}
        groups["B"] = {"K1": "b", "K2": "b", "K3": "b", "K4": "b"}
        groups["C"] = {"K1": "c", "K2": "c", "K9": "c"}

        result = merge_overlapping_groups(groups)

        # A folds into B; C is then compared only with B
        self.assertEqual(list(result), ["B"])
        self.assertEqual(result["B"]["K1"], "b")
        self.assertEqual(result["B"]["K9"], "c")

    def test_empty_group_is_ignored(self):
        groups = OwnerGroups({"Empty": {}, "Full": {"K1": "v"}})
        self.assertEqual(sorted(merge_overlapping_groups(groups)), ["Empty", "Full"])


class TestConsolidateGroups(unittest.TestCase):
    def test_overlap_merge_can_be_disabled(self):
        groups = OwnerGroups()
        groups["YY"] = {"K1": "a"}
        groups["TreeController"] = {"K1": "A", "K2": "B"}

        self.assertEqual(len(consolidate_groups(groups, merge_overlapping=False)), 2)
        self.assertEqual(len(consolidate_groups(groups, merge_overlapping=True)), 1)


if __name__ == '__main__':
    unittest.main()
