"""Sequential orchestration of proxies with response chaining."""

from dataonq.dispatch.sequence import SequenceResult, SequenceRunner

__all__ = ["SequenceResult", "SequenceRunner"]
