"""
Classifier interfaces and implementations.

- TextClassifier / ImageClassifier: interfaces the ensemble depends on
- LLMTextClassifier / LLMImageClassifier: implementations over BaseLLMClient
"""

from spam_ensemble.classifiers.base import ImageClassifier, TextClassifier
from spam_ensemble.classifiers.exceptions import ClassifierError, ClassifierResponseError
from spam_ensemble.classifiers.llm_image import LLMImageClassifier
from spam_ensemble.classifiers.llm_text import LLMTextClassifier

__all__ = [
    "TextClassifier",
    "ImageClassifier",
    "LLMTextClassifier",
    "LLMImageClassifier",
    "ClassifierError",
    "ClassifierResponseError",
]
