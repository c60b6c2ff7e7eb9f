"""
Confidence vector over the closed label set.

ClassificationPrediction is a frozen dataclass: once built, neither the
instance nor its mapping can be changed. Every label of MailClassification
is readable, and labels the mapping does not hold read as 0.0.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from spam_ensemble.models.enums import MailClassification


@dataclass(frozen=True)
class ClassificationPrediction:
    """
    Immutable mapping from label to confidence.

    Values are not validated: callers merging with weights that sum to 1
    are responsible for supplying well-formed distributions.

    Attributes:
        confidence_levels: Read-only label -> confidence mapping
    """

    confidence_levels: Mapping[MailClassification, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Coerce identifiers to labels; unknown identifiers raise ValueError
        levels = {
            MailClassification(label): float(value)
            for label, value in self.confidence_levels.items()
        }
        object.__setattr__(self, "confidence_levels", MappingProxyType(levels))

    def __hash__(self) -> int:
        # MappingProxyType is unhashable; hash the entries instead
        return hash(tuple(sorted(
            (label.value, value) for label, value in self.confidence_levels.items()
        )))

    @classmethod
    def empty(cls) -> "ClassificationPrediction":
        """The fail-open prediction: no entries, every lookup is 0.0."""
        return cls()

    def __getitem__(self, label: MailClassification | str) -> float:
        # Enum members hash by name, so identifiers are normalized before lookup
        key = MailClassification.parse(label)
        if key is None:
            return 0.0
        return self.confidence_levels.get(key, 0.0)

    def weighted(self, weight: float) -> "ClassificationPrediction":
        """Return a copy with every confidence multiplied by weight."""
        return ClassificationPrediction(
            {label: value * weight for label, value in self.confidence_levels.items()}
        )

    @property
    def prediction(self) -> Optional[MailClassification]:
        """
        Label with the highest confidence.

        Ties resolve to the first label in MailClassification.variants().
        Returns None when no label has a positive confidence, which covers
        the empty prediction and the all-zero merge of empty signals.
        """
        best: Optional[MailClassification] = None
        best_value = 0.0
        for label in MailClassification.variants():
            value = self[label]
            if value > best_value:
                best, best_value = label, value
        return best

    @property
    def is_empty(self) -> bool:
        return not any(self.confidence_levels.values())

    def to_dict(self) -> dict[str, float]:
        """Total mapping keyed by label identifier, in stable label order."""
        return {label.value: self[label] for label in MailClassification.variants()}

    def format_confidence_levels(self) -> list[str]:
        """
        Render held entries as percentages, sorted by label identifier.

        Example:
            >>> ClassificationPrediction({"Spam": 0.55, "Ham": 0.45}).format_confidence_levels()
            ['Ham: 45.0%', 'Spam: 55.0%']
        """
        return [
            f"{label.value}: {round(value * 10_000) / 100}%"
            for label, value in sorted(
                self.confidence_levels.items(), key=lambda item: item[0].value
            )
        ]

    def __repr__(self) -> str:
        levels = ", ".join(f"{k.value}={v:.4f}" for k, v in self.confidence_levels.items())
        return f"{self.__class__.__name__}({levels})"
