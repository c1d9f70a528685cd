"""
Prompts Module - centralized prompt templates for the intent classifier.
"""

from alfred.ai.prompts.intent_prompts import (
    CLASSIFIER_SYSTEM_PROMPT,
    CLASSIFIER_USER_PROMPT,
    ENTITY_DESCRIPTIONS,
    INTENT_DESCRIPTIONS,
    build_classifier_prompt,
    build_classifier_system_prompt,
)

__all__ = [
    "CLASSIFIER_SYSTEM_PROMPT",
    "CLASSIFIER_USER_PROMPT",
    "ENTITY_DESCRIPTIONS",
    "INTENT_DESCRIPTIONS",
    "build_classifier_prompt",
    "build_classifier_system_prompt",
]
