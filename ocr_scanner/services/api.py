import asyncio
import os
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, HTTPException
from fastapi.responses import Response, StreamingResponse
from dotenv import load_dotenv
from ocr_scanner.services.models import (
    ScanResponse, CancelResponse, StatusResponse, RecognitionOut,
    CameraResponse, HealthResponse,
)
from ocr_scanner.services.status_store import StatusStore
from ocr_scanner.orchestrator import errors
from ocr_scanner.orchestrator.state_machine import Orchestrator
from ocr_scanner.adapters.camera.frame_capturer import FrameCapturer

load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

# ~15 fps is plenty for aiming the camera at a page
PREVIEW_INTERVAL_S = 1 / 15
MJPEG_BOUNDARY = "frame"


def _result_out(result) -> RecognitionOut | None:
    return RecognitionOut(text=result.text) if result else None


def build_app(status: StatusStore, camera, worker_factory, language: str = "eng") -> FastAPI:
    """Wire one camera, one capturer and one orchestrator into a FastAPI app.

    The camera is started on app startup and released on shutdown. A scan
    still in flight at shutdown is cancelled and its worker terminated before
    the camera goes.
    """
    capturer = FrameCapturer(status)
    orch = Orchestrator(camera=camera, capturer=capturer, worker_factory=worker_factory,
                        status_store=status, language=language)

    async def start_camera() -> bool:
        try:
            await camera.start()
        except errors.DeviceAccessError as e:
            status.camera_error = str(e)
            status.log(f"camera: start failed: {e}")
            return False
        status.camera_error = None
        return True

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        await start_camera()
        try:
            yield
        finally:
            await orch.shutdown()
            await camera.stop()

    app = FastAPI(title="ocr-scanner api", lifespan=lifespan)
    app.state.status = status
    app.state.camera = camera
    app.state.orchestrator = orch
    app.state.lifespan = lifespan

    @app.get("/status", response_model=StatusResponse)
    def get_status():
        # Read-and-clear: the frontend shows a pending alert once
        return StatusResponse(
            busy=status.busy,
            stage=status.stage.value,
            camera_active=camera.active,
            camera_error=status.camera_error,
            result=_result_out(status.last_result),
            last_error=status.last_error,
            alert=status.take_alert(),
            logs=status.logs,
        )

    @app.post("/scan", response_model=ScanResponse)
    async def scan():
        """Capture the current frame and run OCR on it."""
        rr = await orch.scan()
        # a rejected BUSY scan must not eat the alert of the scan in flight
        alert = status.take_alert() if not rr.ok and rr.error_code != errors.ERR_BUSY else None
        return ScanResponse(ok=rr.ok, duration_ms=rr.duration_ms, error_code=rr.error_code,
                            result=_result_out(rr.result), alert=alert)

    @app.post("/scan/cancel", response_model=CancelResponse)
    def cancel_scan():
        return CancelResponse(ok=True, cancelled=orch.cancel())

    @app.post("/camera/start", response_model=CameraResponse)
    async def camera_start():
        ok = await start_camera()
        return CameraResponse(ok=ok, active=camera.active, error=status.camera_error)

    @app.post("/camera/stop", response_model=CameraResponse)
    async def camera_stop():
        await camera.stop()
        return CameraResponse(ok=True, active=camera.active)

    @app.get("/frame.png")
    def frame_png():
        frame = capturer.capture(camera.surface)
        if frame is None:
            raise HTTPException(status_code=503, detail="no frame available")
        return Response(content=frame.data, media_type=frame.media_type)

    @app.get("/video")
    async def video():
        """Live MJPEG preview of the camera surface. Ends when the camera stops."""
        async def frames():
            while camera.active:
                jpg = await asyncio.to_thread(capturer.encode_preview, camera.surface)
                if jpg:
                    yield (f"--{MJPEG_BOUNDARY}\r\nContent-Type: image/jpeg\r\n"
                           f"Content-Length: {len(jpg)}\r\n\r\n").encode() + jpg + b"\r\n"
                await asyncio.sleep(PREVIEW_INTERVAL_S)

        return StreamingResponse(frames(), media_type=f"multipart/x-mixed-replace; boundary={MJPEG_BOUNDARY}")

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(
            api=True,
            camera_adapter=type(camera).__name__,
            camera_active=camera.active,
            ocr_adapter=type(worker_factory).__name__,
            language=language,
        )

    return app


status = StatusStore()

# Camera adapter: CAMERA_ADAPTER env var, cv2 | mock (default: cv2)
_camera_adapter = os.getenv("CAMERA_ADAPTER", "cv2").lower()
if _camera_adapter == "mock":
    from ocr_scanner.adapters.camera.mock_camera import MockCamera
    camera = MockCamera(status)
else:
    from ocr_scanner.adapters.camera.cv2_camera import CV2Camera
    camera = CV2Camera(status)
status.log(f"camera adapter: {type(camera).__name__}")

# OCR adapter: OCR_ADAPTER env var, tesseract | mock (default: tesseract)
_ocr_adapter = os.getenv("OCR_ADAPTER", "tesseract").lower()
if _ocr_adapter == "mock":
    from ocr_scanner.adapters.ocr.mock_worker import MockWorkerFactory
    worker_factory = MockWorkerFactory(status)
else:
    from ocr_scanner.adapters.ocr.tesseract_worker import TesseractWorkerFactory
    worker_factory = TesseractWorkerFactory(status)
status.log(f"ocr adapter: {type(worker_factory).__name__}")

language = os.getenv("OCR_LANG", "eng")

app = build_app(status, camera, worker_factory, language=language)
