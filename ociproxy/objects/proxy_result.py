from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class OutboundCall:
    method: str
    path: str
    host: str
    body: Any = None
    extract_text: bool = False


@dataclass
class ProxyResult:
    status: int
    status_text: str
    data: Any
    raw_text: Optional[str] = None
