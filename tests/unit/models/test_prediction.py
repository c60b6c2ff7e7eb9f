"""Unit tests for the label set and the confidence vector."""

import dataclasses

import pytest

from spam_ensemble.models.enums import MailClassification
from spam_ensemble.models.prediction import ClassificationPrediction


class TestMailClassification:
    """Test the closed label set."""

    def test_variants_stable_order(self):
        assert MailClassification.variants() == [MailClassification.SPAM, MailClassification.HAM]

    def test_parse_known_identifier(self):
        assert MailClassification.parse("Spam") is MailClassification.SPAM
        assert MailClassification.parse("Ham") is MailClassification.HAM

    def test_parse_unknown_identifier(self):
        """Identifiers are case-sensitive and closed."""
        assert MailClassification.parse("spam") is None
        assert MailClassification.parse("Phishing") is None
        assert MailClassification.parse("") is None

    def test_str_is_identifier(self):
        assert str(MailClassification.SPAM) == "Spam"


class TestClassificationPrediction:
    """Test lookups, arg-max and immutability."""

    def test_empty_reads_zero_for_every_label(self):
        empty = ClassificationPrediction.empty()
        for label in MailClassification.variants():
            assert empty[label] == 0.0
        assert empty.is_empty
        assert empty.prediction is None

    def test_lookup_by_label_or_identifier(self):
        prediction = ClassificationPrediction({MailClassification.SPAM: 0.7})
        assert prediction[MailClassification.SPAM] == 0.7
        assert prediction["Spam"] == 0.7
        assert prediction["Ham"] == 0.0

    def test_lookup_unknown_identifier_reads_zero(self):
        prediction = ClassificationPrediction({"Spam": 0.7})
        assert prediction["Phishing"] == 0.0

    def test_string_keys_are_coerced(self):
        prediction = ClassificationPrediction({"Spam": 1})
        assert list(prediction.confidence_levels) == [MailClassification.SPAM]
        assert isinstance(prediction["Spam"], float)

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            ClassificationPrediction({"Phishing": 1.0})

    def test_prediction_is_argmax(self):
        prediction = ClassificationPrediction({"Spam": 0.2, "Ham": 0.8})
        assert prediction.prediction is MailClassification.HAM

    def test_prediction_tie_resolves_to_first_variant(self):
        prediction = ClassificationPrediction({"Ham": 0.5, "Spam": 0.5})
        assert prediction.prediction is MailClassification.SPAM

    def test_all_zero_prediction_is_undecided(self):
        prediction = ClassificationPrediction({"Spam": 0.0, "Ham": 0.0})
        assert prediction.prediction is None
        assert prediction.is_empty

    def test_instance_is_frozen(self):
        prediction = ClassificationPrediction({"Spam": 1.0})
        with pytest.raises(dataclasses.FrozenInstanceError):
            prediction.confidence_levels = {}

    def test_mapping_is_read_only(self):
        prediction = ClassificationPrediction({"Spam": 1.0})
        with pytest.raises(TypeError):
            prediction.confidence_levels[MailClassification.HAM] = 1.0

    def test_source_mapping_mutation_does_not_leak(self):
        source = {"Spam": 1.0}
        prediction = ClassificationPrediction(source)
        source["Spam"] = 0.0
        assert prediction["Spam"] == 1.0

    def test_weighted(self):
        prediction = ClassificationPrediction({"Spam": 0.8, "Ham": 0.2}).weighted(0.5)
        assert prediction["Spam"] == pytest.approx(0.4)
        assert prediction["Ham"] == pytest.approx(0.1)

    def test_to_dict_is_total(self):
        assert ClassificationPrediction({"Ham": 1.0}).to_dict() == {"Spam": 0.0, "Ham": 1.0}

    def test_format_confidence_levels(self):
        prediction = ClassificationPrediction({"Spam": 0.55, "Ham": 0.45})
        assert prediction.format_confidence_levels() == ["Ham: 45.0%", "Spam: 55.0%"]

    def test_format_rounds_to_two_decimals(self):
        prediction = ClassificationPrediction({"Spam": 0.123456})
        assert prediction.format_confidence_levels() == ["Spam: 12.35%"]

    def test_format_empty(self):
        assert ClassificationPrediction.empty().format_confidence_levels() == []

    def test_equality_by_value(self):
        assert ClassificationPrediction({"Spam": 1.0}) == ClassificationPrediction({MailClassification.SPAM: 1.0})

    def test_hashable_and_consistent_with_equality(self):
        a = ClassificationPrediction({"Spam": 0.7, "Ham": 0.3})
        b = ClassificationPrediction({MailClassification.HAM: 0.3, MailClassification.SPAM: 0.7})
        assert hash(a) == hash(b)
        assert len({a, b, ClassificationPrediction.empty()}) == 2
