from __future__ import annotations

"""
Domain Constants.

Format markers of the tiny v1 mapping grammar and application-wide
identifiers shared by the parser, the renderer and the configuration layer.
"""

CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# TINY V1 GRAMMAR
# -----------------------------------------------------------------------------
FORMAT_VERSION = "v1"
COLUMN_SEPARATOR = "\t"
NESTING_SEPARATOR = "$"
COMMENT_PREFIX = "#"
LINE_TERMINATOR = "\n"

CLASS_MARKER = "CLASS"
FIELD_MARKER = "FIELD"
METHOD_MARKER = "METHOD"

# Header must hold the version marker plus at least two namespaces
MIN_HEADER_TOKENS = 3

# -----------------------------------------------------------------------------
# FILE I/O
# -----------------------------------------------------------------------------
DEFAULT_ENCODING = "utf-8"
STAGING_SUFFIX = ".partial"
