"""Algorithm invariant violations."""

from typing import Dict, Optional

from .base import CodeOwnerFinderError


class KnowledgeInvariantError(CodeOwnerFinderError):
    """Raised when the knowledge model produces an impossible value.

    These errors point at a defect in the weighting or spreading math,
    never at bad input, so the offending value is reported as is.
    """

    def __init__(self, reason: str, developer: Optional[str] = None, value: Optional[object] = None):
        details: Dict[str, str] = {"reason": reason}
        if developer is not None:
            details["developer"] = developer
        if value is not None:
            details["value"] = repr(value)

        super().__init__("Knowledge invariant violated", details=details)
        self.reason = reason
        self.developer = developer
        self.value = value
