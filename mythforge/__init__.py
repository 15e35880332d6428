"""Mythforge - recovery and validation of generated mythology responses.

Turns raw generative-text output into a complete, structured mythology
response and judges whether it is complete, faithful, and original enough
to accept.
"""

from mythforge.memory.myth_response import GenerationPhase, GenerationResponse
from mythforge.settings import DEFAULT_THRESHOLDS, Settings, Thresholds
from mythforge.utils.json_parser import parse_with_strategies, perform_advanced_completion
from mythforge.utils.structure_completion import complete_response, ensure_complete_structure

__all__ = [
    "DEFAULT_THRESHOLDS",
    "GenerationPhase",
    "GenerationResponse",
    "Settings",
    "Thresholds",
    "complete_response",
    "ensure_complete_structure",
    "parse_with_strategies",
    "perform_advanced_completion",
]
