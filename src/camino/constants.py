"""Camino constants.

Single source of truth for template delimiters, numeric bounds and default
limits used by the lexer, parser, evaluator and configuration layer.
"""

from __future__ import annotations

# =============================================================================
# Template Delimiters
# =============================================================================

#: Opens an embedded expression in passthrough text
EL_START: str = "<%="

#: Closes an embedded expression
EL_END: str = "%>"

# =============================================================================
# Numeric Bounds
# =============================================================================

#: Smallest integer literal (64-bit signed)
MIN_INTEGER: int = -(2**63)

#: Largest integer literal (64-bit signed)
MAX_INTEGER: int = 2**63 - 1

# =============================================================================
# Evaluation Limits
# =============================================================================

#: Default maximum nesting of function calls within one render
DEFAULT_MAX_CALL_DEPTH: int = 100

#: Upper bound accepted for the configured call depth
MAX_CALL_DEPTH_LIMIT: int = 10000

#: Largest List that range() will build
MAX_RANGE_SIZE: int = 1_000_000

# =============================================================================
# Configuration Paths
# =============================================================================

#: Project configuration file name, looked up in the working directory
PROJECT_CONFIG_FILENAME: str = "camino.yaml"
