"""
Abstract classifier interfaces consumed by the ensemble.

The ensemble never knows which model sits behind a classifier. Concrete
implementations (LLM-backed, local models, test stubs) only have to
implement classify().
"""

from abc import ABC, abstractmethod


class TextClassifier(ABC):
    """Classifies a piece of text into exactly one label identifier."""

    @abstractmethod
    async def classify(self, text: str) -> str:
        """
        Return the best label identifier for non-empty text.

        Raises:
            ClassifierError: Or any other exception; adapters fail open on all of them
        """
        pass


class ImageClassifier(ABC):
    """Scores raw image bytes against label identifiers."""

    @abstractmethod
    async def classify(self, data: bytes) -> dict[str, float]:
        """
        Return zero or more (identifier, confidence) pairs for an image.

        Confidences need not be normalized. An empty mapping means the
        classifier had nothing to say about the image.
        """
        pass
