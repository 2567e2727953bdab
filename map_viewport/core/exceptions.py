"""Unified viewport exception taxonomy.

Every domain exception inherits from ``ViewportError`` and carries
structured context fields so that the tool layer can report failures
consistently without matching on exception types.

Taxonomy categories
-------------------
- ``ValidationError``: bad caller input (coordinates, bbox, options).
- ``PermanentError``: internal invariant violations; programming errors.
- ``ContractError``: tool-option payload drift from the documented schema.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for tool results and logging.
"""

from __future__ import annotations


class ViewportError(Exception):
    """Base exception for all viewport-domain errors.

    Attributes:
        message: Human-readable error description.  Callers match on
            substrings of this text, so wording is part of the contract.
        stage: Engine stage where the error occurred
            (e.g. ``"extract"``, ``"bounds"``, ``"compose"``).
        code: Machine-readable error code (e.g. ``"NO_VALID_GEOMETRY"``).
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        return "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(ViewportError):
    """Caller input failed validation."""


class PermanentError(ViewportError):
    """Internal invariant violation. Not a user-facing condition."""


class ContractError(ViewportError):
    """Tool options drifted from the documented payload schema."""
