"""
Semantic Judge Factory
Centralizes the logic for selecting the optional AI collaborator.
"""

import logging

from mnemo.application.config import AppConfig
from mnemo.domain.ports import SemanticJudge
from mnemo.infrastructure.adapters.chat_judge import ChatCompletionJudge

logger = logging.getLogger(__name__)


def get_semantic_judge(config: AppConfig) -> SemanticJudge | None:
    """
    Returns a ChatCompletionJudge when an endpoint and key are configured, else None.
    """
    if not config.ai_configured:
        logger.debug("No AI endpoint configured; semantic judge disabled")
        return None

    return ChatCompletionJudge(
        endpoint=config.ai_endpoint,
        api_key=config.ai_api_key,
        deployment=config.ai_deployment,
        max_tokens=config.ai_max_tokens,
        timeout=config.ai_timeout,
    )
