#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the bbslate library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Document Tree - object discriminators used in Slate JSON
3. Escaping - characters the built-in escaping rule protects
4. Defaults - default option values
5. CLI - exit codes
"""

from __future__ import annotations

import re
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

ObjectKind = Literal["value", "document", "block", "inline", "text", "mark", "string"]

# =============================================================================
# Document Tree
# =============================================================================

OBJECT_VALUE = "value"
OBJECT_DOCUMENT = "document"
OBJECT_BLOCK = "block"
OBJECT_INLINE = "inline"
OBJECT_TEXT = "text"
OBJECT_MARK = "mark"
OBJECT_STRING = "string"

# =============================================================================
# Escaping
# =============================================================================

ESCAPE_CHAR = "\\"

# Backslash must be escaped before brackets so bracket escapes are not doubled
BACKSLASH_PATTERN = re.compile(r"([\\])")
BRACKET_PATTERN = re.compile(r"([\[\]])")

# Opening tag: [tag], [tag=value], [tag key=value key2="quoted value"]
TAG_PATTERN = re.compile(r"\[(/?)([\w*]+)(?:=([^\]\s][^\]]*)|((?:\s+[\w-]+=(?:\"[^\"]*\"|'[^']*'|[^\s\]]+))*))?\s*\]")
ATTRIBUTE_PATTERN = re.compile(r"([\w-]+)=(?:\"([^\"]*)\"|'([^']*)'|([^\s\]]+))")

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_DESERIALIZE_TYPE = "block"
DEFAULT_BLOCK_SEPARATOR = "\n"
DEFAULT_STRIP_OUTPUT = True
DEFAULT_ENABLE_ESCAPE_TAGS = False
DEFAULT_TOKENIZER_STRICT_MODE = False
DEFAULT_TAGS_CASE_SENSITIVE = False

# =============================================================================
# CLI
# =============================================================================

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7
