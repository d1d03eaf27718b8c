"""Selector learning: candidate scores, learning state and the learner."""

from htmlsoups.learning.selector_score import SelectorCandidate
from htmlsoups.learning.state import LearningState
from htmlsoups.learning.selector_learner import SelectorLearner

__all__ = [
    "LearningState",
    "SelectorCandidate",
    "SelectorLearner",
]
