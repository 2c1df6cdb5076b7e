import logging
from enum import Enum
from pydantic import BaseModel
from typing import Callable, Optional

from plagiarism_client.config import PresentationPolicy
from plagiarism_client.models.schemas import DetectionResult
from plagiarism_client.routes.navigation import Navigator
from plagiarism_client.services.gateway import BackendGateway
from plagiarism_client.services.presentation import ReportView, build_report_view
from plagiarism_client.services.report_renderer import render_report
from plagiarism_client.utils.errors import CheckerError, log_alert
from plagiarism_client.utils.exporters import REPORT_FILENAME, FileSaver

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load results."
DOWNLOAD_FAILED = "Failed to download report. Please try again."


class ResultsPhase(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ResultsState(BaseModel):
    phase: ResultsPhase = ResultsPhase.LOADING
    result: Optional[DetectionResult] = None
    view: Optional[ReportView] = None
    error: Optional[str] = None
    downloading: bool = False


class ResultsController:
    """
    Results page for one task. The result is fetched exactly once per mount;
    showing it again means mounting a new controller.
    """

    def __init__(self, task_id: str, gateway: BackendGateway, navigator: Navigator,
                 saver: Optional[FileSaver] = None,
                 policy: Optional[PresentationPolicy] = None,
                 alert: Callable[[str], None] = log_alert):
        self.task_id = task_id
        self.gateway = gateway
        self.navigator = navigator
        self.saver = saver or FileSaver()
        self.policy = policy or PresentationPolicy()
        self.alert = alert
        self.state = ResultsState()
        self._mount_started = False
        self._mounted = True

    async def mount(self) -> ResultsState:
        if self._mount_started:
            raise RuntimeError(f"Results for {self.task_id} already mounted")
        self._mount_started = True

        try:
            result = await self.gateway.fetch_result(self.task_id)
        except CheckerError as e:
            logger.error(f"Failed to load results for {self.task_id}: {e}")
            self._update(phase=ResultsPhase.ERROR, error=LOAD_FAILED)
            return self.state

        view = build_report_view(self.task_id, result, self.policy)
        self._update(phase=ResultsPhase.LOADED, result=result, view=view)
        return self.state

    def unmount(self) -> None:
        self._mounted = False

    def render(self, color: bool = False) -> str:
        if self.state.phase == ResultsPhase.LOADING:
            return "Analyzing content...\n"
        if self.state.phase == ResultsPhase.ERROR:
            return f"Error: {self.state.error}\nTry again: submit a new check.\n"
        return render_report(self.state.view, color=color)

    def try_again(self) -> None:
        self.navigator.to_check()

    async def download(self) -> Optional[str]:
        """
        Fetch the PDF report and save it as plagiarism_report_<task_id>.pdf.
        Returns the saved path, or None when disabled or failed. Only a
        loaded report can be downloaded.
        """
        if self.state.phase != ResultsPhase.LOADED or self.state.downloading:
            return None

        self._update(downloading=True)
        try:
            data = await self.gateway.fetch_report(self.task_id)
            return self.saver.save(data, REPORT_FILENAME.format(task_id=self.task_id))
        except Exception as e:
            logger.error(f"Download failed: {e}")
            if self._mounted:
                self.alert(DOWNLOAD_FAILED)
            return None
        finally:
            self._update(downloading=False)

    def _update(self, **changes) -> None:
        if not self._mounted:
            logger.debug(f"Discarding update for unmounted results view {self.task_id}")
            return
        self.state = self.state.model_copy(update=changes)
