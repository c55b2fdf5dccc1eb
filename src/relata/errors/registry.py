# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""Process-wide registry of error categories and codes."""

import threading
from typing import Any


class ErrorRegistry:
    """Singleton registry; each category and code name maps to one object."""

    _instance = None
    _lock = threading.RLock()

    def __new__(cls) -> "ErrorRegistry":
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._categories = {}
                instance._codes = {}
                cls._instance = instance
            return cls._instance

    def get_category(self, name: str) -> Any:
        """Return the category called ``name``, creating it on first use."""
        with self._lock:
            category = self._categories.get(name)
            if category is None:
                from relata.errors.base import ErrorCategory

                category = self._categories[name] = ErrorCategory(name)
            return category

    def get_code(self, code: str, category_name: str = "INTERNAL") -> Any:
        """Return the error code ``code``, creating it in ``category_name`` on first use.

        A code keeps the category it was first registered with.
        """
        with self._lock:
            error_code = self._codes.get(code)
            if error_code is None:
                from relata.errors.base import ErrorCode

                error_code = ErrorCode(code, self.get_category(category_name))
                self._codes[code] = error_code
            return error_code


registry = ErrorRegistry()
