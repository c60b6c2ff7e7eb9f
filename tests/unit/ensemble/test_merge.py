"""Unit tests for the merge engine."""

import pytest

from spam_ensemble.ensemble.exceptions import EnsembleError, WeightContractViolation
from spam_ensemble.ensemble.merge import label_of, merge, merge_uniform, scale, vector_from
from spam_ensemble.models.enums import MailClassification
from spam_ensemble.models.prediction import ClassificationPrediction

SPAM = vector_from({"Spam": 1.0})
HAM = vector_from({"Ham": 1.0})
EMPTY = ClassificationPrediction.empty()


class TestVectorFrom:
    def test_builds_from_identifiers(self):
        prediction = vector_from({"Spam": 0.9, "Ham": 0.1})
        assert prediction[MailClassification.SPAM] == 0.9
        assert prediction[MailClassification.HAM] == 0.1

    def test_unknown_identifier_rejected(self):
        with pytest.raises(ValueError):
            vector_from({"Newsletter": 1.0})


class TestMerge:
    """Test the weighted linear combination."""

    def test_signal_weights_scenario(self):
        """Body Spam, subject Ham, no attachments."""
        result = merge([SPAM, HAM, EMPTY], [0.5, 0.3, 0.2])
        assert result[MailClassification.SPAM] == pytest.approx(0.5)
        assert result[MailClassification.HAM] == pytest.approx(0.3)
        assert label_of(result) is MailClassification.SPAM

    def test_result_holds_every_label(self):
        result = merge([SPAM], [1.0])
        assert set(result.confidence_levels) == set(MailClassification.variants())
        assert result[MailClassification.HAM] == 0.0

    def test_all_empty_inputs_are_undecided(self):
        result = merge([EMPTY, EMPTY, EMPTY], [0.5, 0.3, 0.2])
        assert result.to_dict() == {"Spam": 0.0, "Ham": 0.0}
        assert label_of(result) is None

    def test_identity_with_single_full_weight(self):
        prediction = vector_from({"Spam": 0.37, "Ham": 0.63})
        result = merge([prediction], [1.0])
        assert result["Spam"] == pytest.approx(0.37)
        assert result["Ham"] == pytest.approx(0.63)

    @pytest.mark.parametrize("weights", [[1.0], [0.5, 0.5], [0.5, 0.3, 0.2], [0.1] * 10])
    def test_merging_copies_of_a_vector_returns_it(self, weights):
        x = vector_from({"Spam": 0.37, "Ham": 0.63})
        result = merge([x] * len(weights), weights)
        assert result.to_dict() == pytest.approx(x.to_dict())

    @pytest.mark.parametrize("w", [0.0, 0.1, 0.25, 0.5, 0.8, 1.0])
    def test_linear_in_each_input(self, w):
        a = vector_from({"Spam": 0.9, "Ham": 0.1})
        b = vector_from({"Spam": 0.35, "Ham": 0.4})
        result = merge([a, b], [w, 1 - w])
        for label in MailClassification.variants():
            assert result[label] == pytest.approx(w * a[label] + (1 - w) * b[label])

    def test_order_of_pairs_does_not_matter(self):
        a = vector_from({"Spam": 0.9, "Ham": 0.1})
        b = vector_from({"Spam": 0.2, "Ham": 0.8})
        forward = merge([a, b], [0.7, 0.3])
        backward = merge([b, a], [0.3, 0.7])
        assert forward["Spam"] == pytest.approx(backward["Spam"])
        assert forward["Ham"] == pytest.approx(backward["Ham"])

    def test_distributions_stay_distributions(self):
        a = vector_from({"Spam": 0.9, "Ham": 0.1})
        b = vector_from({"Spam": 0.2, "Ham": 0.8})
        result = merge([a, b], [0.25, 0.75])
        assert sum(result.to_dict().values()) == pytest.approx(1.0)

    def test_empty_input_list(self):
        result = merge([], [])
        assert result.to_dict() == {"Spam": 0.0, "Ham": 0.0}

    def test_tolerates_float_rounding(self):
        result = merge([SPAM, HAM, HAM], [0.1, 0.1, 0.8000000000000002])
        assert result["Ham"] == pytest.approx(0.9)

    def test_length_mismatch(self):
        with pytest.raises(WeightContractViolation) as exc_info:
            merge([SPAM, HAM], [1.0])
        assert exc_info.value.details == {"predictions": 2, "weights": 1}

    def test_weights_not_summing_to_one(self):
        with pytest.raises(WeightContractViolation, match="summing up to 1.0"):
            merge([SPAM, HAM], [0.5, 0.4])

    def test_violation_is_ensemble_error(self):
        with pytest.raises(EnsembleError):
            merge([SPAM], [0.5])


class TestMergeUniform:
    def test_two_images_scenario(self):
        result = merge_uniform([
            vector_from({"Spam": 0.9, "Ham": 0.1}),
            vector_from({"Spam": 0.2, "Ham": 0.8}),
        ])
        assert result["Spam"] == pytest.approx(0.55)
        assert result["Ham"] == pytest.approx(0.45)

        final = merge([EMPTY, EMPTY, result], [0.5, 0.3, 0.2])
        assert final["Spam"] == pytest.approx(0.11)
        assert final["Ham"] == pytest.approx(0.09)
        assert label_of(final) is MailClassification.SPAM

    def test_three_way_split(self):
        result = merge_uniform([SPAM, SPAM, HAM])
        assert result["Spam"] == pytest.approx(2 / 3)
        assert result["Ham"] == pytest.approx(1 / 3)

    @pytest.mark.parametrize("k", [1, 3, 16])
    def test_copies_of_a_vector_return_it(self, k):
        v = vector_from({"Spam": 0.37, "Ham": 0.63})
        result = merge_uniform([v] * k)
        assert result["Spam"] == pytest.approx(0.37)
        assert result["Ham"] == pytest.approx(0.63)

    def test_no_predictions_is_empty(self):
        result = merge_uniform([])
        assert result.is_empty
        assert result.confidence_levels == {}


class TestScale:
    def test_scale(self):
        result = scale(vector_from({"Spam": 0.6}), 0.5)
        assert result["Spam"] == pytest.approx(0.3)
        assert result["Ham"] == 0.0
