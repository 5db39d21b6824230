# ==============================================
# NameNormalizer
# ==============================================
#
# PURPOSE:
#   Turn class and attribute names into the snake_case form used for
#   collection names and document keys.
#
#     UserAccount  → user_account      (collection of class UserAccount)
#     lastLogin    → last_login        (document key of field lastLogin)
#     HTTPRequest  → http_request
#     URL          → url
#     ip_address   → ip_address        (snake_case is left alone)
#     user-name    → user_name         (anything not [A-Za-z0-9_] is a separator)
#
# Word boundaries are found with a single pattern and joined with "_".
# Conversions are memoized; get_mappings() reports them.
#
# ==============================================

import re
from typing import Dict

_SEPARATORS = re.compile(r"[^A-Za-z0-9_]+")

# Empty matches between words:
#   "userName"    lowercase/digit followed by an uppercase letter
#   "HTTPRequest" the last capital of an acronym followed by a capitalized word
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

_REPEATED_UNDERSCORES = re.compile(r"__+")


class NameNormalizer:
    """snake_case conversion with a memo of every name it has seen."""

    def __init__(self):
        self._mappings: Dict[str, str] = {}

    def normalize(self, name: str) -> str:
        """
        Convert a name to snake_case.

        Args:
            name: Class or attribute name ("UserAccount", "lastLogin")

        Returns:
            The snake_case form ("user_account", "last_login")
        """
        if not name:
            return name

        converted = self._mappings.get(name)
        if converted is None:
            converted = self._to_snake_case(name)
            self._mappings[name] = converted
        return converted

    def get_mappings(self) -> Dict[str, str]:
        return dict(self._mappings)

    @staticmethod
    def _to_snake_case(name: str) -> str:
        words = _WORD_BOUNDARY.sub("_", _SEPARATORS.sub("_", name))
        return _REPEATED_UNDERSCORES.sub("_", words).strip("_").lower()
