import time
import logging
from pydantic import BaseModel
from typing import Callable, Optional

from plagiarism_client.models.schemas import RewriteMode
from plagiarism_client.services.gateway import BackendGateway
from plagiarism_client.utils.errors import CheckerError, EmptyInputError, log_alert
from plagiarism_client.utils.exporters import (
    GENERATED_PDF_FILENAME, WORD_FILENAME, DataResource, FileSaver, MemoryClipboard,
    build_word_document,
)

logger = logging.getLogger(__name__)

COPIED_FLASH_SECONDS = 2.0

REWRITE_FAILED = "Rewrite failed. Please check the backend connection."
GENERATE_FAILED = "AI Generation failed."
PDF_FAILED = "Failed to download PDF."
COPY_FAILED = "Failed to copy to clipboard."
DOC_FAILED = "Failed to save Word document."


class RewriteState(BaseModel):
    text: str = ""
    mode: RewriteMode = RewriteMode.ACADEMIC
    result: Optional[str] = None
    rewriting: bool = False      # shared by rewrite and generate
    exporting_pdf: bool = False
    copied_at: Optional[float] = None


class RewriteController:
    """
    Smart rewriter: rewrites the input in the selected mode, or runs a full
    "comprehensive" pass, and exports the result to the clipboard, a Word
    document or a PDF.
    """

    def __init__(self, gateway: BackendGateway, saver: Optional[FileSaver] = None,
                 clipboard=None, alert: Callable[[str], None] = log_alert,
                 clock: Callable[[], float] = time.monotonic):
        self.gateway = gateway
        self.saver = saver or FileSaver()
        self.clipboard = clipboard or MemoryClipboard()
        self.alert = alert
        self.clock = clock
        self.state = RewriteState()
        self._mounted = True

    @property
    def can_rewrite(self) -> bool:
        return not self.state.rewriting and bool(self.state.text.strip())

    @property
    def copied(self) -> bool:
        if self.state.copied_at is None:
            return False
        return self.clock() - self.state.copied_at < COPIED_FLASH_SECONDS

    def set_text(self, text: str) -> None:
        self._update(text=text)

    def set_mode(self, mode) -> None:
        self._update(mode=RewriteMode(mode))

    def unmount(self) -> None:
        self._mounted = False

    async def rewrite(self) -> Optional[str]:
        return await self._run(self.state.mode, REWRITE_FAILED)

    async def generate(self) -> Optional[str]:
        return await self._run(RewriteMode.COMPREHENSIVE, GENERATE_FAILED)

    async def _run(self, mode: RewriteMode, failure_message: str) -> Optional[str]:
        if self.state.rewriting:
            return None
        if not self.state.text.strip():
            raise EmptyInputError("Enter some text to rewrite.")

        self._update(rewriting=True)
        try:
            result = await self.gateway.rewrite(self.state.text, mode)
        except CheckerError as e:
            logger.error(f"Rewrite ({mode.value}) failed: {e}")
            if self._mounted:
                self.alert(failure_message)
            return None
        finally:
            self._update(rewriting=False)

        self._update(result=result.rewritten_text, copied_at=None)
        return result.rewritten_text

    def copy(self) -> bool:
        if not self.state.result:
            return False
        try:
            self.clipboard.write(self.state.result)
        except Exception as e:
            logger.error(f"Clipboard write failed: {e}")
            self.alert(COPY_FAILED)
            return False
        self._update(copied_at=self.clock())
        return True

    def word_document(self) -> Optional[DataResource]:
        if not self.state.result:
            return None
        return build_word_document(self.state.result)

    def export_word(self) -> Optional[str]:
        resource = self.word_document()
        if resource is None:
            return None
        try:
            return self.saver.save_url(resource.url, WORD_FILENAME)
        except (OSError, ValueError) as e:
            logger.error(f"Word export failed: {e}")
            self.alert(DOC_FAILED)
            return None

    async def export_pdf(self) -> Optional[str]:
        if not self.state.result or self.state.exporting_pdf:
            return None

        self._update(exporting_pdf=True)
        try:
            data = await self.gateway.render_pdf(self.state.result)
            return self.saver.save(data, GENERATED_PDF_FILENAME)
        except Exception as e:
            logger.error(f"PDF download failed: {e}")
            if self._mounted:
                self.alert(PDF_FAILED)
            return None
        finally:
            self._update(exporting_pdf=False)

    def _update(self, **changes) -> None:
        if not self._mounted:
            logger.debug("Discarding update for unmounted rewriter")
            return
        self.state = self.state.model_copy(update=changes)
