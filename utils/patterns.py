"""Pre-compiled regex patterns for budget payload cleanup.

All patterns are compiled once at module import so the per-item coercion
loop in ``budget.normalize`` does not recompile them.

Usage:
    from utils.patterns import CURRENCY_SYMBOLS

    CURRENCY_SYMBOLS.sub('', "$1,200")
"""

import re

# Whitespace normalization: multiple spaces/tabs/newlines
WHITESPACE = re.compile(r'\s+')

# Currency symbols for stripping during numeric conversion
CURRENCY_SYMBOLS = re.compile(r'[\$€£¥₹₽]')
