from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ScanStage(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    WORKER_LOADING = "worker_loading"
    RECOGNIZING = "recognizing"
    TERMINATING = "terminating"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class CapturedFrame:
    data: bytes                # encoded image
    width: int
    height: int
    media_type: str = "image/png"


@dataclass(frozen=True)
class RecognitionResult:
    text: str


@dataclass
class ScanResult:
    ok: bool
    duration_ms: int
    error_code: Optional[str] = None
    result: Optional[RecognitionResult] = None
