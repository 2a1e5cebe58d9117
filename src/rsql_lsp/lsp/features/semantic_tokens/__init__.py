"""LSP semantic tokens feature for SQL embedded in R strings."""

from .semantic_tokens import register_semantic_tokens, SemanticTokensService
from .document_handler import DocumentEventHandler
from .semantic_tokens_config import SemanticTokensConfig
from .semantic_tokens_classifier import SemanticTokensParser, Token, TokenModifier
from .position_calculator import PositionCalculator
from .token_processor import TokenProcessor

__all__ = [
    "register_semantic_tokens",
    "SemanticTokensService",
    "DocumentEventHandler",
    "SemanticTokensConfig",
    "SemanticTokensParser",
    "Token",
    "TokenModifier",
    "PositionCalculator",
    "TokenProcessor",
]
