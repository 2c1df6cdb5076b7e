import os
import html
import shutil
import logging
import tempfile
import subprocess
from contextlib import contextmanager
from urllib.parse import quote, unquote

from plagiarism_client.utils.errors import CheckerError

logger = logging.getLogger(__name__)

REPORT_FILENAME = "plagiarism_report_{task_id}.pdf"
GENERATED_PDF_FILENAME = "ai_generated_document.pdf"
WORD_FILENAME = "rewritten_text.doc"

WORD_MEDIA_TYPE = "application/vnd.ms-word"

WORD_HEADER = (
    "<html xmlns:o='urn:schemas-microsoft-com:office:office' "
    "xmlns:w='urn:schemas-microsoft-com:office:word' "
    "xmlns='http://www.w3.org/TR/REC-html40'>"
    "<head><meta charset='utf-8'><title>Rewritten Text</title></head><body>"
)
WORD_FOOTER = "</body></html>"


class DataResource:
    """An in-memory payload addressable as a ``data:`` URL."""

    def __init__(self, media_type: str, payload: bytes, charset: str = "utf-8"):
        self.media_type = media_type
        self.payload = payload
        self.charset = charset

    @property
    def url(self) -> str:
        text = self.payload.decode(self.charset)
        return f"data:{self.media_type};charset={self.charset}," + quote(text, safe="-_.!~*'()")

    @classmethod
    def from_url(cls, url: str) -> "DataResource":
        header, _, body = url.partition(",")
        if not header.startswith("data:"):
            raise ValueError("Not a data URL")
        media_type, _, params = header[len("data:"):].partition(";")
        charset = "utf-8"
        if params.startswith("charset="):
            charset = params[len("charset="):]
        return cls(media_type, unquote(body, encoding=charset).encode(charset), charset)


def build_word_document(text: str) -> DataResource:
    """
    Wrap text in a minimal HTML document that word processors open as a
    .doc file. Newlines become <br>.
    """
    body = html.escape(text).replace("\n", "<br>")
    source_html = WORD_HEADER + f"<p>{body}</p>" + WORD_FOOTER
    return DataResource(WORD_MEDIA_TYPE, source_html.encode("utf-8"))


class FileSaver:
    """
    Save a binary payload under a fixed filename.

    The payload is first written to a temporary resource next to the target,
    which is released on every exit path.
    """

    def __init__(self, download_dir: str = "."):
        self.download_dir = download_dir

    def save(self, data: bytes, filename: str) -> str:
        os.makedirs(self.download_dir, exist_ok=True)
        target = os.path.join(self.download_dir, os.path.basename(filename))
        with self._temporary_resource(data) as temp_path:
            os.replace(temp_path, target)
        logger.info(f"Saved {len(data)} bytes to {target}")
        return target

    def save_url(self, url: str, filename: str) -> str:
        """Save the bytes a ``data:`` URL resolves to."""
        return self.save(DataResource.from_url(url).payload, filename)

    @contextmanager
    def _temporary_resource(self, data: bytes):
        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(dir=self.download_dir, suffix=".part", delete=False) as temp_file:
                temp_path = temp_file.name
                temp_file.write(data)
            yield temp_path
        finally:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)


class ClipboardError(CheckerError):
    pass


class SystemClipboard:
    """Writes to the desktop clipboard through the first available helper."""

    COMMANDS = (
        ["pbcopy"],
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
        ["clip"],
    )

    def write(self, text: str) -> None:
        for command in self.COMMANDS:
            if shutil.which(command[0]):
                subprocess.run(command, input=text.encode("utf-8"), check=True)
                return
        raise ClipboardError("No clipboard helper found (pbcopy, wl-copy, xclip, xsel or clip).")


class MemoryClipboard:
    """Clipboard kept in process, for headless use."""

    def __init__(self):
        self.text = None

    def write(self, text: str) -> None:
        self.text = text
