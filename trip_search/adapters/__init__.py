"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the search core to external systems:
- Query parsing (rule-based) and the semantic oracle (OpenAI)
- Catalog storage (CSV file, in-memory)
"""
