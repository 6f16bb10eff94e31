"""
Tesseract OCR worker (pytesseract).

Each recognize() spawns the tesseract binary as a child process, so the
engine runs out of process. pytesseract is blocking, so every call is pushed
to a thread with asyncio.to_thread.

TESSERACT_CMD overrides the binary path, OCR_TIMEOUT_S bounds one recognition.
The binary path is process configuration: pytesseract keeps it in a module
global, so the factory sets it once and workers never touch it.
"""
import asyncio
import os

import cv2
import numpy as np
import pytesseract

from ocr_scanner.adapters.ocr.base import RecognitionWorker, WorkerFactory
from ocr_scanner.orchestrator.contracts import RecognitionResult


def _read_text(image: bytes, lang: str, config: str, timeout_s: float) -> str:
    """Decode the PNG and run tesseract on it; blocking, call from a worker thread."""
    bgr = cv2.imdecode(np.frombuffer(image, dtype=np.uint8), cv2.IMREAD_COLOR)
    if bgr is None:
        raise ValueError("could not decode captured image")
    rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
    return pytesseract.image_to_string(rgb, lang=lang, config=config, timeout=timeout_s)


class TesseractWorker(RecognitionWorker):
    def __init__(self, status_store, config: str = "", timeout_s: float = 30.0):
        self.status = status_store
        self._config = config
        self._timeout_s = timeout_s
        self._lang: str | None = None
        self._ready = False
        self._terminated = False

    def _check_alive(self):
        if self._terminated:
            raise RuntimeError("tesseract worker already terminated")

    async def load(self):
        self._check_alive()
        version = await asyncio.to_thread(pytesseract.get_tesseract_version)
        self.status.log(f"tesseract_worker: loaded tesseract {version}")

    async def load_language(self, lang: str):
        self._check_alive()
        installed = set(await asyncio.to_thread(pytesseract.get_languages, config=""))
        missing = [part for part in lang.split("+") if part not in installed]
        if missing:
            raise ValueError(f"tesseract language data not installed: {missing}")
        self.status.log(f"tesseract_worker: language '{lang}' available")

    async def initialize(self, lang: str):
        self._check_alive()
        self._lang = lang
        self._ready = True
        self.status.log(f"tesseract_worker: initialized lang={lang} config='{self._config}'")

    async def recognize(self, image: bytes) -> RecognitionResult:
        self._check_alive()
        if not self._ready:
            raise RuntimeError("tesseract worker used before initialize()")
        text = await asyncio.to_thread(_read_text, image, self._lang, self._config, self._timeout_s)
        self.status.log(f"tesseract_worker: recognized {len(text)} chars")
        return RecognitionResult(text=text)

    async def terminate(self):
        self._check_alive()
        self._terminated = True
        self._ready = False
        self.status.log("tesseract_worker: terminated")


class TesseractWorkerFactory(WorkerFactory):
    def __init__(self, status_store, tesseract_cmd: str | None = None,
                 config: str = "", timeout_s: float | None = None):
        self.status = status_store
        self.tesseract_cmd = tesseract_cmd or os.getenv("TESSERACT_CMD") or None
        self.config = config
        self.timeout_s = timeout_s if timeout_s is not None else float(os.getenv("OCR_TIMEOUT_S", "30"))
        if self.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd
            self.status.log(f"tesseract_worker: binary {self.tesseract_cmd}")

    def create(self) -> TesseractWorker:
        return TesseractWorker(self.status, config=self.config, timeout_s=self.timeout_s)
