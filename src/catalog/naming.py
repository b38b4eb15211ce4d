"""Location id → human-readable name.

Pure and locale-independent: only ASCII case/digit transitions and
separator characters are treated as word boundaries, so applying the
function to its own output returns it unchanged.

  "SanDiego"  -> "San Diego"
  "NewYork"   -> "New York"
  "san_diego" -> "San Diego"
  "dc2East"   -> "Dc 2 East"
  "HQData"    -> "HQ Data"
"""

from __future__ import annotations

import re

_BOUNDARY = re.compile(
    r"(?<=[a-z])(?=[A-Z])"          # camelCase
    r"|(?<=[A-Z])(?=[A-Z][a-z])"    # acronym followed by a word
    r"|(?<=[A-Za-z])(?=[0-9])"      # letter -> digit
    r"|(?<=[0-9])(?=[A-Za-z])"      # digit -> letter
)
_SEPARATORS = re.compile(r"[\s_.\-]+")


def format_location_name(location_id: str) -> str:
    spaced = _BOUNDARY.sub(" ", location_id)
    words = [w for w in _SEPARATORS.split(spaced) if w]
    return " ".join(w[0].upper() + w[1:] for w in words)
