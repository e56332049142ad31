"""Detection results shared by every antivirus scanner."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Result:
    """Outcome of scanning one object with one antivirus engine."""

    infected: bool = False
    """True when the engine flagged the object."""
    output: str = ""
    """The detection name reported by the engine."""
    out: str = ""
    """Raw console output of the scanner, kept for diagnostics."""

    def to_dict(self) -> dict[str, object]:
        """Return the public fields, leaving out the raw console output."""
        return {"infected": self.infected, "output": self.output}


class ParseDetectionError(Exception):
    """Raised when a scanner's output cannot be parsed into a detection."""

    def __init__(self, message: str = "failed to parse detection name") -> None:
        super().__init__(message)