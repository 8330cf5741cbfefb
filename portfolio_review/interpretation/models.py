from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class InterpretationResult:
    """Output of the interpretation service: free text or structured data.

    Exactly one of ``text`` and ``structured`` is set.
    """

    text: str | None = None
    structured: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.structured is None):
            raise ValueError("InterpretationResult needs exactly one of text or structured")

    @property
    def is_structured(self) -> bool:
        return self.structured is not None
