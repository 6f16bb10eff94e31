import asyncio
import time
from contextlib import asynccontextmanager
from ocr_scanner.orchestrator.contracts import ScanResult, ScanStage
from ocr_scanner.orchestrator import errors


class Orchestrator:
    """Runs one capture -> recognize -> report cycle per scan() call.

    Stages: capturing, worker_loading, recognizing, terminating, then done or
    failed. A worker that was created is terminated exactly once on every path,
    including cancellation.
    """

    def __init__(self, camera, capturer, worker_factory, status_store, language: str = "eng"):
        self.camera = camera
        self.capturer = capturer
        self.worker_factory = worker_factory
        self.status = status_store
        self.language = language
        self._inflight: asyncio.Task | None = None
        self._scan_done: asyncio.Event | None = None
        self._cancel_requested = False

    def _enter(self, stage: ScanStage):
        self.status.set_stage(stage)
        self.status.log(f"scan: -> {stage.value}")

    async def scan(self) -> ScanResult:
        if self.status.busy:
            self.status.log("scan: rejected, another scan is in flight")
            return ScanResult(ok=False, duration_ms=0, error_code=errors.ERR_BUSY)

        self.status.set_busy(True)
        self._cancel_requested = False
        self._scan_done = asyncio.Event()
        t0 = time.time()
        try:
            self._inflight = asyncio.create_task(self._run())
            try:
                return await self._inflight
            except asyncio.CancelledError:
                self.status.log("scan: cancelled, pending result discarded")
                self._enter(ScanStage.IDLE)
                if not self._cancel_requested:
                    raise
                dt = int((time.time() - t0) * 1000)
                return ScanResult(ok=False, duration_ms=dt, error_code=errors.ERR_CANCELLED)
        finally:
            self._inflight = None
            self.status.set_busy(False)
            self._scan_done.set()

    async def _run(self) -> ScanResult:
        t0 = time.time()
        try:
            self._enter(ScanStage.CAPTURING)
            frame = await asyncio.to_thread(self.capturer.capture, self.camera.surface)
            if frame is None:
                raise errors.CaptureUnavailable("no active frame on the camera surface")

            async with self._worker() as worker:
                self._enter(ScanStage.RECOGNIZING)
                try:
                    result = await worker.recognize(frame.data)
                except Exception as e:
                    raise errors.RecognitionError(f"{type(e).__name__}: {e}") from e

            self.status.last_result = result
            self.status.last_error = None
            self._enter(ScanStage.DONE)
            dt = int((time.time() - t0) * 1000)
            self.status.log(f"scan: done {len(result.text)} chars dt={dt}ms")
            return ScanResult(ok=True, duration_ms=dt, result=result)

        except errors.ScanError as e:
            return self._fail(t0, e.code, e.alert, f"{type(e).__name__}: {e}")
        except Exception as e:
            return self._fail(t0, errors.ERR_UNKNOWN, errors.ALERT_OCR_FAILED, f"{type(e).__name__}: {e}")

    def _fail(self, t0: float, code: str, alert: str, detail: str) -> ScanResult:
        dt = int((time.time() - t0) * 1000)
        self._enter(ScanStage.FAILED)
        self.status.log(f"scan: error {detail}")
        self.status.last_error = code
        self.status.alert(alert)
        return ScanResult(ok=False, duration_ms=dt, error_code=code)

    @asynccontextmanager
    async def _worker(self):
        self._enter(ScanStage.WORKER_LOADING)
        try:
            worker = self.worker_factory.create()
        except Exception as e:
            raise errors.WorkerInitializationError(f"create: {type(e).__name__}: {e}") from e
        try:
            try:
                await worker.load()
                await worker.load_language(self.language)
                await worker.initialize(self.language)
            except Exception as e:
                raise errors.WorkerInitializationError(f"{type(e).__name__}: {e}") from e
            yield worker
        finally:
            self._enter(ScanStage.TERMINATING)
            try:
                await worker.terminate()
            except Exception as e:
                # the scan outcome stands; a failed release is operator detail
                self.status.log(f"scan: worker terminate failed {type(e).__name__}: {e}")

    def cancel(self) -> bool:
        """Cancel the in-flight scan, if any. The worker is still terminated."""
        if self._inflight is None or self._inflight.done():
            return False
        self._cancel_requested = True
        self._inflight.cancel()
        self.status.log("scan: cancel requested")
        return True

    async def shutdown(self):
        """Cancel the in-flight scan and wait until its worker is released
        and the busy flag is cleared."""
        done = self._scan_done
        if self.cancel() and done is not None:
            await done.wait()
