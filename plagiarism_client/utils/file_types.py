import os
import mimetypes
from pydantic import BaseModel
from typing import Literal, Optional, Union

from plagiarism_client.utils.errors import UnsupportedFileTypeError

PLAIN_TEXT = "text/plain"
PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Accepted-type filter: media type -> extensions
ACCEPTED_TYPES = {
    PLAIN_TEXT: (".txt",),
    PDF: (".pdf",),
    DOCX: (".docx",),
}


class DroppedFile(BaseModel):
    """A file as handed over by the drop zone, with its declared media type."""
    name: str
    content_type: str
    data: bytes

    @classmethod
    def from_path(cls, path: str, content_type: Optional[str] = None) -> "DroppedFile":
        if content_type is None:
            content_type = guess_content_type(path)
        with open(path, "rb") as f:
            data = f.read()
        return cls(name=os.path.basename(path), content_type=content_type, data=data)


class PlainText(BaseModel):
    kind: Literal["plain_text"] = "plain_text"
    name: str
    text: str


class PdfDocument(BaseModel):
    kind: Literal["pdf"] = "pdf"
    name: str
    data: bytes
    content_type: str = PDF


class WordDocument(BaseModel):
    kind: Literal["docx"] = "docx"
    name: str
    data: bytes
    content_type: str = DOCX


DropVariant = Union[PlainText, PdfDocument, WordDocument]


def guess_content_type(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    for content_type, extensions in ACCEPTED_TYPES.items():
        if ext in extensions:
            return content_type
    guessed, _ = mimetypes.guess_type(path)
    return guessed or "application/octet-stream"


def decode_text(data: bytes) -> str:
    # Try utf-8, fall back to latin-1
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def classify_drop(file: DroppedFile) -> DropVariant:
    """
    Resolve a dropped file into its variant, strictly by declared media type.
    Anything outside the accepted types is rejected here.
    """
    content_type = file.content_type.split(";")[0].strip().lower()

    if content_type == PLAIN_TEXT:
        return PlainText(name=file.name, text=decode_text(file.data))
    if content_type == PDF:
        return PdfDocument(name=file.name, data=file.data)
    if content_type == DOCX:
        return WordDocument(name=file.name, data=file.data)

    raise UnsupportedFileTypeError(
        f"Unsupported file type: {file.content_type or 'unknown'}. "
        "Supported: .txt, .pdf, .docx"
    )
