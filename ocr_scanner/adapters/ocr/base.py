from ocr_scanner.orchestrator.contracts import RecognitionResult


class RecognitionWorker:
    """Single-use OCR worker. The orchestrator drives it through
    load -> load_language -> initialize -> recognize -> terminate, once."""

    async def load(self):
        raise NotImplementedError

    async def load_language(self, lang: str):
        raise NotImplementedError

    async def initialize(self, lang: str):
        raise NotImplementedError

    async def recognize(self, image: bytes) -> RecognitionResult:
        raise NotImplementedError

    async def terminate(self):
        raise NotImplementedError


class WorkerFactory:
    def create(self) -> RecognitionWorker:
        """Return a fresh worker; never hand out the same instance twice."""
        raise NotImplementedError
