from dataclasses import dataclass, field
from typing import Optional, List
from ocr_scanner.orchestrator.contracts import RecognitionResult, ScanStage

MAX_LOG_LINES = 200

@dataclass
class StatusStore:
    busy: bool = False
    stage: ScanStage = ScanStage.IDLE
    last_result: Optional[RecognitionResult] = None
    last_error: Optional[str] = None
    pending_alert: Optional[str] = None   # set on scan failure, cleared after frontend reads it
    camera_error: Optional[str] = None
    logs: List[str] = field(default_factory=list)

    def set_busy(self, v: bool):
        self.busy = v

    def set_stage(self, stage: ScanStage):
        self.stage = stage

    def alert(self, msg: str):
        self.pending_alert = msg

    def take_alert(self) -> Optional[str]:
        msg, self.pending_alert = self.pending_alert, None
        return msg

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > MAX_LOG_LINES:
            self.logs = self.logs[-MAX_LOG_LINES:]
