from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence


@dataclass(frozen=True)
class EngineResult:
    text: str
    grounding_chunks: Sequence[Any] = field(default_factory=tuple)


class AIClient(Protocol):
    async def generate(self, prompt: str) -> EngineResult: ...
