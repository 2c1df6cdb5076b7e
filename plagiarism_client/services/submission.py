import logging
from enum import Enum
from pydantic import BaseModel
from typing import List, Optional

from plagiarism_client.routes.navigation import Navigator
from plagiarism_client.services.gateway import BackendGateway
from plagiarism_client.utils.errors import CheckerError, EmptyInputError, describe_error
from plagiarism_client.utils.file_types import DroppedFile, PlainText, classify_drop

logger = logging.getLogger(__name__)

CHECK_FAILED = "Failed to check text. Please try again."
UPLOAD_FAILED = "File upload failed. Please try again."


class SubmissionPhase(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    READING = "reading"
    UPLOADING = "uploading"
    NAVIGATED_AWAY = "navigated_away"
    ERROR = "error"


IN_FLIGHT = {SubmissionPhase.CHECKING, SubmissionPhase.READING, SubmissionPhase.UPLOADING}


class SubmissionState(BaseModel):
    phase: SubmissionPhase = SubmissionPhase.IDLE
    text: str = ""
    error: Optional[str] = None
    task_id: Optional[str] = None


class SubmissionController:
    """
    Drives the check page: pasted text is checked on demand, dropped plain
    text lands in the edit buffer for review, dropped PDF/DOCX files are
    uploaded straight away. A successful submission navigates to results.
    """

    def __init__(self, gateway: BackendGateway, navigator: Navigator):
        self.gateway = gateway
        self.navigator = navigator
        self.state = SubmissionState()
        self._mounted = True

    @property
    def busy(self) -> bool:
        return self.state.phase in IN_FLIGHT

    @property
    def can_check(self) -> bool:
        return not self.busy and bool(self.state.text.strip())

    def set_text(self, text: str) -> None:
        if self.busy:
            return
        self.state = self.state.model_copy(update={"text": text})

    def unmount(self) -> None:
        self._mounted = False

    async def check(self, sources: Optional[List[str]] = None) -> Optional[str]:
        """Submit the edit buffer. Returns the task id on success."""
        if self.busy:
            return None
        if not self.state.text.strip():
            raise EmptyInputError("Enter some text to analyze.")

        self._transition(SubmissionPhase.CHECKING, error=None)
        try:
            task = await self.gateway.submit_text(self.state.text, sources)
        except CheckerError as e:
            logger.error(f"Text check failed: {e}")
            self._fail(describe_error(e, CHECK_FAILED))
            return None
        except Exception:
            logger.exception("Text check failed unexpectedly")
            self._fail(CHECK_FAILED)
            raise
        return self._navigate(task.task_id)

    async def drop(self, file: DroppedFile) -> Optional[str]:
        """
        Handle a dropped file. Plain text is read into the buffer without
        creating a task; PDF and DOCX are uploaded and return the task id.
        """
        if self.busy:
            return None
        variant = classify_drop(file)

        if isinstance(variant, PlainText):
            self._transition(SubmissionPhase.READING, error=None)
            self._transition(SubmissionPhase.IDLE, text=variant.text)
            logger.info(f"Loaded {file.name} into the edit buffer ({len(variant.text)} chars)")
            return None

        self._transition(SubmissionPhase.UPLOADING, error=None)
        try:
            task = await self.gateway.submit_file(variant)
        except CheckerError as e:
            logger.error(f"Upload of {file.name} failed: {e}")
            self._fail(describe_error(e, UPLOAD_FAILED))
            return None
        except Exception:
            logger.exception(f"Upload of {file.name} failed unexpectedly")
            self._fail(UPLOAD_FAILED)
            raise
        return self._navigate(task.task_id)

    def _navigate(self, task_id: str) -> Optional[str]:
        if not self._mounted:
            logger.debug(f"Discarding task {task_id}: check page no longer mounted")
            return None
        self._transition(SubmissionPhase.NAVIGATED_AWAY, task_id=task_id)
        self.navigator.to_results(task_id)
        return task_id

    def _fail(self, message: str) -> None:
        if not self._mounted:
            logger.debug(f"Discarding error for unmounted check page: {message}")
            return
        self._transition(SubmissionPhase.ERROR, error=message)

    def _transition(self, phase: SubmissionPhase, **changes) -> None:
        logger.debug(f"Submission {self.state.phase.value} -> {phase.value}")
        self.state = self.state.model_copy(update={"phase": phase, **changes})
