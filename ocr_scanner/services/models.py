from pydantic import BaseModel
from typing import Literal, Optional

StageName = Literal["idle", "capturing", "worker_loading", "recognizing", "terminating", "done", "failed"]

class RecognitionOut(BaseModel):
    text: str

class ScanResponse(BaseModel):
    ok: bool
    duration_ms: int
    error_code: Optional[str] = None
    result: Optional[RecognitionOut] = None
    alert: Optional[str] = None       # user-facing notice; shown once, then cleared

class CancelResponse(BaseModel):
    ok: bool
    cancelled: bool

class StatusResponse(BaseModel):
    busy: bool
    stage: StageName
    camera_active: bool
    camera_error: Optional[str] = None
    result: Optional[RecognitionOut] = None
    last_error: Optional[str] = None
    alert: Optional[str] = None       # read-and-clear, same slot ScanResponse.alert drains
    logs: list[str]

class CameraResponse(BaseModel):
    ok: bool
    active: bool
    error: Optional[str] = None

class HealthResponse(BaseModel):
    api: bool
    camera_adapter: str
    camera_active: bool
    ocr_adapter: str
    language: str
