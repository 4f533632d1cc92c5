# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

# for test files, silence irrelevant and noisy pylint warnings
# pylint: disable=use-implicit-booleaness-not-comparison,protected-access,missing-docstring

import unittest

import pytest

from seqfeat.common.ftable.errors import FeatureAttachmentError
from seqfeat.common.ftable.feature import Feature, check_ranges_fit
from seqfeat.common.ftable.qualifiers import Qualifiers
from seqfeat.common.ftable.range import Range
from seqfeat.common.ftable.sequence import Sequence


class TestConstruction(unittest.TestCase):
    def test_start_end(self):
        feature = Feature("CDS", start=5, end=10, strand=-1)
        assert feature.key == "CDS"
        assert feature.ranges == (Range(5, 10, strand=-1),)
        assert feature.start == 5
        assert feature.end == 10
        assert feature.strand == -1

    def test_ranges_sorted(self):
        feature = Feature("CDS", [Range(300, 400), Range(100, 200)])
        assert feature.ranges == (Range(100, 200), Range(300, 400))
        assert feature.start == 100
        assert feature.end == 400

    def test_fuzzy_start_end(self):
        feature = Feature("CDS", [Range(10, 20, fuzzy_start=5, fuzzy_end=25)])
        assert feature.start == 5
        assert feature.end == 25

    def test_no_ranges(self):
        feature = Feature("source", [])
        assert feature.ranges == ()
        assert repr(feature) == "source(no ranges)"
        with self.assertRaisesRegex(ValueError, "no ranges"):
            feature.start  # pylint: disable=pointless-statement
        with self.assertRaisesRegex(ValueError, "no ranges"):
            feature.end  # pylint: disable=pointless-statement
        assert feature.strand == 0

    def test_bad_keys(self):
        with self.assertRaises(TypeError):
            Feature(None, start=1, end=5)
        for bad in ["", "x" * 16]:
            with self.assertRaisesRegex(ValueError, "invalid length"):
                Feature(bad, start=1, end=5)
        assert Feature("x" * 15, start=1, end=5).key == "x" * 15

    def test_conflicting_arguments(self):
        with self.assertRaisesRegex(ValueError, "cannot be combined"):
            Feature("CDS", [Range(1, 5)], start=1, end=5)
        with self.assertRaisesRegex(ValueError, "required"):
            Feature("CDS", start=1)
        with self.assertRaisesRegex(ValueError, "required"):
            Feature("CDS")

    def test_bad_ranges(self):
        with self.assertRaisesRegex(TypeError, "Range instances"):
            Feature("CDS", [(1, 5)])

    def test_qualifiers(self):
        feature = Feature("CDS", start=1, end=5, qualifiers={"gene": ["dnaA"]})
        assert feature.qualifier_values("gene") == ["dnaA"]
        quals = Qualifiers({"pseudo": None})
        feature = Feature("CDS", start=1, end=5, qualifiers=quals)
        assert feature.qualifiers is quals

    def test_repr(self):
        feature = Feature("CDS", [Range(700, 750, strand=-1), Range(800, 850, strand=-1)])
        assert repr(feature) == "CDS(complement(join(700..750,800..850)))"
        assert str(feature) == repr(feature)


class TestStrand(unittest.TestCase):
    @pytest.fixture(autouse=True)
    def inject_fixtures(self, caplog):
        self.caplog = caplog  # pylint: disable=attribute-defined-outside-init

    def test_mixed(self):
        feature = Feature("CDS", [Range(1, 38), Range(1200, 1349, strand=-1)])
        assert feature.strand == 0
        assert "multiple strands" in self.caplog.text

    def test_setter(self):
        feature = Feature("CDS", [Range(1, 38), Range(1200, 1349, strand=-1)])
        feature.strand = -1
        assert [part.strand for part in feature.ranges] == [-1, -1]
        assert feature.strand == -1


class TestQualifierAccess(unittest.TestCase):
    def setUp(self):
        self.feature = Feature("CDS", start=1, end=30)

    def test_add_and_read(self):
        self.feature.qualifier_add("gene", "dnaA")
        self.feature.qualifier_add("gene", "dnaB")
        self.feature.qualifier_add("codon_start", 2)
        assert self.feature.qualifier_values("gene") == ["dnaA", "dnaB"]
        assert self.feature.qualifier_values("codon_start") == ["2"]
        assert self.feature.qualifier_names() == ["codon_start", "gene"]

    def test_flags(self):
        self.feature.qualifier_add("pseudo")
        assert self.feature.qualifier_exists("pseudo")
        assert self.feature.qualifier_values("pseudo") == []

    def test_missing(self):
        assert not self.feature.qualifier_exists("gene")
        assert self.feature.qualifier_values("gene") == []

    def test_remove(self):
        self.feature.qualifier_add("note", "a")
        assert self.feature.qualifier_remove("note") == ["a"]
        assert not self.feature.qualifier_exists("note")


class TestComparisons(unittest.TestCase):
    def setUp(self):
        self.feature = Feature("CDS", [Range(100, 200), Range(300, 400)])

    def test_overlaps(self):
        assert self.feature.overlaps(Range(150, 160))
        assert self.feature.overlaps(Range(390, 450))
        assert not self.feature.overlaps(Range(250, 260))
        assert self.feature.overlaps(Feature("gene", [Range(50, 60), Range(190, 210)]))
        assert not self.feature.overlaps(Feature("gene", start=201, end=299))

    def test_contains(self):
        assert self.feature.contains(Range(150, 160))
        assert not self.feature.contains(Range(150, 350))
        assert self.feature.contains(Feature("gene", [Range(110, 120), Range(310, 320)]))
        assert not self.feature.contains(Feature("gene", [Range(110, 120), Range(250, 260)]))
        assert not self.feature.contains(Feature("gene", []))

    def test_spans(self):
        # gaps between ranges don't matter
        assert self.feature.spans(Range(250, 260))
        assert self.feature.spans(Range(100, 400))
        assert not self.feature.spans(Range(50, 150))
        assert not Feature("gene", []).spans(Range(1, 5))

    def test_wrong_types(self):
        with self.assertRaises(TypeError):
            self.feature.overlaps((100, 200))

    def test_sorting(self):
        first = Feature("CDS", start=5, end=10)
        second = Feature("CDS", start=5, end=20)
        third = Feature("CDS", start=8, end=9)
        assert sorted([third, second, first]) == [first, second, third]


class TestAttachment(unittest.TestCase):
    def setUp(self):
        self.sequence = Sequence("atgaaatagccc" * 3)
        self.feature = Feature("CDS", start=1, end=9)

    def test_detached(self):
        assert not self.feature.is_attached
        assert self.feature.sequence is None
        assert self.feature.residues is None
        assert self.feature.sequence_type is None
        with self.assertRaisesRegex(ValueError, "not attached"):
            self.feature.get_residues()

    def test_attached(self):
        self.sequence.add_feature(self.feature)
        assert self.feature.is_attached
        assert self.feature.sequence is self.sequence
        assert self.feature.sequence_type == "dna"
        assert self.feature.get_residues() == "atgaaatag"

    def test_add_ranges_checked(self):
        self.sequence.add_feature(self.feature)
        with self.assertRaises(FeatureAttachmentError):
            self.feature.add_ranges([Range(20, 30), Range(30, 40)])
        # nothing added on failure
        assert len(self.feature.ranges) == 1
        self.feature.add_ranges([Range(20, 30)])
        assert len(self.feature.ranges) == 2

    def test_spliced_residues(self):
        feature = Feature("CDS", [Range(1, 3, strand=-1), Range(7, 9, strand=-1)])
        self.sequence.add_feature(feature)
        # reverse strand ranges are read right to left
        assert feature.get_residues() == "ctacat"

    def test_protein_residues(self):
        protein = Sequence("MKLVWQ", seq_type="protein")
        feature = Feature("region", [Range(1, 2), Range(5, 6)])
        protein.add_feature(feature)
        assert feature.get_residues() == "MKWQ"

    def test_clone_shares_sequence(self):
        self.feature.qualifier_add("gene", "x")
        self.sequence.add_feature(self.feature)
        clone = self.feature.clone()
        assert clone.sequence is self.sequence
        assert clone not in self.sequence.features
        assert clone.ranges == self.feature.ranges
        clone.ranges[0].strand = -1
        clone.qualifier_add("gene", "y")
        assert self.feature.strand == 1
        assert self.feature.qualifier_values("gene") == ["x"]

    def test_clone_with_ranges(self):
        clone = self.feature.clone([Range(2, 4)])
        assert clone.ranges == (Range(2, 4),)
        assert self.feature.ranges == (Range(1, 9),)


class TestRangesFit(unittest.TestCase):
    def test_fit(self):
        check_ranges_fit("CDS", [Range(1, 10)], 10)
        check_ranges_fit("CDS", [Range(1, 10)], None)
        with self.assertRaisesRegex(FeatureAttachmentError, "beyond sequence length 9"):
            check_ranges_fit("CDS", [Range(1, 10)], 9)
        with self.assertRaises(FeatureAttachmentError):
            check_ranges_fit("CDS", [Range(1, 5, fuzzy_end=12)], 10)
