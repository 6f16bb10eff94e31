"""Mock OCR worker: fixed text, optional failure at a chosen lifecycle stage.

The factory counts created/terminated workers so tests can check the
one-create-one-terminate rule.
"""
import asyncio
import os
from ocr_scanner.adapters.ocr.base import RecognitionWorker, WorkerFactory
from ocr_scanner.orchestrator.contracts import RecognitionResult

STAGES = ("create", "load", "load_language", "initialize", "recognize", "terminate")


class MockWorker(RecognitionWorker):
    def __init__(self, factory: "MockWorkerFactory"):
        self._factory = factory
        self.status = factory.status
        self.calls: list[str] = []
        self.terminated = False

    async def _step(self, stage: str):
        self.calls.append(stage)
        await asyncio.sleep(0)
        if self._factory.fail_stage == stage:
            raise RuntimeError(f"mock worker failed at {stage}")

    async def load(self):
        await self._step("load")

    async def load_language(self, lang: str):
        await self._step("load_language")

    async def initialize(self, lang: str):
        await self._step("initialize")

    async def recognize(self, image: bytes) -> RecognitionResult:
        if self._factory.hold is not None:
            # lets a test keep a scan in flight
            self._factory.recognizing.set()
            try:
                await self._factory.hold.wait()
            finally:
                # next held scan must signal afresh
                self._factory.recognizing.clear()
        await self._step("recognize")
        self.status.log(f"mock_worker: recognized {self._factory.text!r}")
        return RecognitionResult(text=self._factory.text)

    async def terminate(self):
        self._factory.terminated += 1
        self.terminated = True
        await self._step("terminate")


class MockWorkerFactory(WorkerFactory):
    def __init__(self, status_store, text: str | None = None, fail_stage: str | None = None):
        if fail_stage is not None and fail_stage not in STAGES:
            raise ValueError(f"unknown stage {fail_stage!r}")
        self.status = status_store
        self.text = text if text is not None else os.getenv("MOCK_OCR_TEXT", "HELLO")
        self.fail_stage = fail_stage
        self.hold: asyncio.Event | None = None
        self.recognizing = asyncio.Event()
        self.workers: list[MockWorker] = []
        self.terminated = 0

    @property
    def created(self) -> int:
        return len(self.workers)

    def create(self) -> MockWorker:
        if self.fail_stage == "create":
            raise RuntimeError("mock worker failed at create")
        worker = MockWorker(self)
        self.workers.append(worker)
        return worker
