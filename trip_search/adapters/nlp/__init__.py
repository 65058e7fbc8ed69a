"""NLP adapters - Implementations of NLP-related ports.

Available implementations:
- RuleBasedQueryParser: Deterministic keyword/regex parser
- OpenAIChatOracle: Chat-completion oracle over the OpenAI API
"""

from .openai_oracle import OpenAIChatOracle
from .rule_based import RuleBasedQueryParser

__all__ = ["RuleBasedQueryParser", "OpenAIChatOracle"]
