"""
Deterministic comparison rules.

This file exists to make the noise the comparison discounts explicit.
"""

# Workflow-node fields the upstream API omits or returns inconsistently.
# Each of these has a default value, so "absent" and "default" are the same.
DEFAULT_OPTIONAL_FIELDS = frozenset({
    "executeOnce",       # default: false
    "alwaysOutputData",  # default: false
    "retryOnFail",       # default: false
    "onError",
    "continueOnFail",    # default: false
    "disabled",          # default: false
})

# Arrays whose elements all carry a scalar under this field compare as multisets.
KEY_FIELD = "key"

# The tree passes walk an explicit stack; only the stdlib decoder recurses.
DEFAULT_MAX_DEPTH = 2000
MAX_DEPTH_CEILING = 10000

# Numbers whose leading digit sits outside [1e-7, 1e21) render in scientific form.
PLAIN_EXPONENT_MIN = -7
PLAIN_EXPONENT_MAX = 21

DESCRIPTION = "Compares JSON strings semantically, ignoring whitespace and key ordering differences."
