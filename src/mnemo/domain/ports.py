"""
Ports (interfaces) for optional collaborators.

These define the contract that infrastructure adapters must implement.
The evaluator depends on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import JudgeRequest, JudgeVerdict


class SemanticJudge(ABC):
    """
    Port for deciding whether an answer means the same as the accepted ones.

    Implementations:
        - ChatCompletionJudge: Asks an OpenAI-compatible chat endpoint.
    """

    @abstractmethod
    async def is_available(self) -> bool:
        """
        Report whether the judge can be consulted at all.

        Returns:
            False when the collaborator is not configured or reachable.
        """
        pass

    @abstractmethod
    async def evaluate(self, request: JudgeRequest) -> JudgeVerdict:
        """
        Judge a single answer.

        Args:
            request: Accepted answers, the learner's response and optional context.

        Returns:
            A YES / PARTIAL / NO verdict with a short reason.

        Raises:
            JudgeError: On transport failure or an unusable reply.
        """
        pass
