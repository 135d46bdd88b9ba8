"""
Compression page workflow.

``CompressWorkflow`` owns the page state (selected file, its data URI, the
in-progress flag, the last result and error, the chosen level) and drives the
compression action. Everything that touches the outside world is injected:

- ``reader``: turns an uploaded file into a data URI
- ``action``: the compression action, ``(data_uri, level) -> CompressPdfOutput``
- ``downloader``: starts a download, ``(data_uri, filename) -> None``
- ``notifier``: shows a notice, ``(description, title=None, level="info")``
- ``persist``: saves the snapshot while a compression is running

States: empty -> file-loaded -> compressing -> result-ready | error.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional

from django.conf import settings

from src.api.compress_pdf.actions import (
    COMPRESSION_LEVELS,
    DEFAULT_COMPRESSION_LEVEL,
    CompressPdfOutput,
    compress_pdf_action,
)
from src.api.file_validation import sanitize_filename
from src.api.logging_utils import get_logger

from .file_utils import read_file_as_data_uri

logger = get_logger(__name__)

COMPRESSED_FILENAME_PREFIX = "compressed_"
FILE_SOURCES = ("dropzone", "picker")


class WorkflowState(str, Enum):
    EMPTY = "empty"
    FILE_LOADED = "file-loaded"
    COMPRESSING = "compressing"
    RESULT_READY = "result-ready"
    ERROR = "error"


def reduction_percentage(original_size: int, compressed_size: int) -> float:
    """Size reduction in percent, rounded to two decimals; 0 for an empty original."""
    if original_size <= 0:
        return 0
    return round((original_size - compressed_size) / original_size * 100, 2)


def compressed_filename(original_name: str) -> str:
    return f"{COMPRESSED_FILENAME_PREFIX}{original_name}"


@dataclass
class CompressionResultStats:
    original_size: int
    compressed_size: int
    reduction_percentage: float


@dataclass
class WorkflowSnapshot:
    """Serializable page state, stored in the session between requests."""

    file_name: Optional[str] = None
    pdf_data_uri: Optional[str] = None
    is_compressing: bool = False
    stats: Optional[CompressionResultStats] = None
    compressed_pdf_uri: Optional[str] = None
    error: Optional[str] = None
    compression_level: str = DEFAULT_COMPRESSION_LEVEL
    pending_download: Optional[str] = None
    reset_file_input: bool = False

    @property
    def state(self) -> WorkflowState:
        if self.is_compressing:
            return WorkflowState.COMPRESSING
        if self.pdf_data_uri is None:
            # A failed read leaves an error but no file
            return WorkflowState.EMPTY
        if self.error:
            return WorkflowState.ERROR
        if self.stats is not None and self.compressed_pdf_uri:
            return WorkflowState.RESULT_READY
        return WorkflowState.FILE_LOADED

    def clear_result(self):
        self.stats = None
        self.compressed_pdf_uri = None
        self.error = None
        self.pending_download = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "WorkflowSnapshot":
        if not data:
            return cls()
        data = dict(data)
        stats = data.pop("stats", None)
        known = {name for name in cls.__dataclass_fields__}
        snapshot = cls(**{k: v for k, v in data.items() if k in known})
        if stats:
            snapshot.stats = CompressionResultStats(**stats)
        if snapshot.compression_level not in COMPRESSION_LEVELS:
            snapshot.compression_level = DEFAULT_COMPRESSION_LEVEL
        return snapshot


def _noop(*args, **kwargs):
    return None


@dataclass
class CompressWorkflow:
    snapshot: WorkflowSnapshot = field(default_factory=WorkflowSnapshot)
    notifier: Callable[..., None] = _noop
    downloader: Callable[[str, str], None] = _noop
    action: Callable[[str, str], CompressPdfOutput] = compress_pdf_action
    reader: Callable[[Any], str] = read_file_as_data_uri
    persist: Callable[[WorkflowSnapshot], None] = _noop
    max_upload_size: int = field(
        default_factory=lambda: getattr(settings, "MAX_UPLOAD_SIZE", 50 * 1024 * 1024)
    )

    @property
    def state(self) -> WorkflowState:
        return self.snapshot.state

    def select_files(self, files: Iterable[Any], source: str = "picker") -> bool:
        """Load a newly chosen file. Only the first of ``files`` is used."""
        files = list(files or [])
        if not files:
            return False
        if len(files) > 1:
            logger.info(
                "Multiple files selected, using the first one",
                extra={"event": "multiple_files_ignored", "count": len(files), "source": source},
            )
        return self.select_file(files[0], source=source)

    def select_file(self, uploaded_file: Any, source: str = "picker") -> bool:
        snap = self.snapshot
        snap.file_name = getattr(uploaded_file, "name", None) or "document.pdf"
        snap.pdf_data_uri = None
        snap.is_compressing = False
        snap.clear_result()
        snap.reset_file_input = False

        size = getattr(uploaded_file, "size", None)
        if size is not None and size > self.max_upload_size:
            message = (
                f"File too large. Maximum size is "
                f"{self.max_upload_size / (1024 * 1024):.0f} MB."
            )
            return self._file_read_failed(message)

        try:
            snap.pdf_data_uri = self.reader(uploaded_file)
        except Exception as e:
            logger.warning(
                "Failed to read selected file",
                extra={"event": "file_read_error", "source": source, "error": str(e)},
            )
            return self._file_read_failed(str(e) or "Failed to read file.")

        logger.debug(
            "File selected",
            extra={
                "event": "file_selected",
                "source": source,
                "file_size": size,
                "uploaded_filename": sanitize_filename(snap.file_name),
            },
        )
        return True

    def _file_read_failed(self, message: str) -> bool:
        snap = self.snapshot
        snap.error = message
        snap.file_name = None
        snap.pdf_data_uri = None
        self.notifier(message, title="File Read Error", level="error")
        return False

    def remove_file(self):
        snap = self.snapshot
        snap.file_name = None
        snap.pdf_data_uri = None
        snap.is_compressing = False
        snap.clear_result()
        snap.reset_file_input = True
        self.notifier("File removed.")

    def set_compression_level(self, level: str) -> bool:
        if level not in COMPRESSION_LEVELS:
            return False
        self.snapshot.compression_level = level
        return True

    def compress(self) -> bool:
        """Run the compression action for the loaded file.

        Returns True when a compressed result was stored.
        """
        snap = self.snapshot
        if not snap.file_name or not snap.pdf_data_uri:
            self.notifier(
                "Please select a PDF file to compress.",
                title="No file selected",
                level="error",
            )
            return False

        if snap.is_compressing:
            self.notifier("A compression is already running. Please wait.", level="warning")
            return False

        snap.is_compressing = True
        snap.clear_result()
        self.persist(snap)

        try:
            result = self.action(snap.pdf_data_uri, snap.compression_level)

            if result.error:
                snap.error = result.error
                self.notifier(result.error, title="Compression Error", level="error")
                return False

            if result.is_success:
                snap.stats = CompressionResultStats(
                    original_size=result.original_size,
                    compressed_size=result.compressed_size,
                    reduction_percentage=reduction_percentage(
                        result.original_size, result.compressed_size
                    ),
                )
                snap.compressed_pdf_uri = result.compressed_pdf_data_uri
                self.downloader(
                    result.compressed_pdf_data_uri, compressed_filename(snap.file_name)
                )
                self.notifier(
                    "Your PDF has been compressed. Download has started.",
                    title="Compression Successful!",
                    level="success",
                )
                return True

            return False

        except Exception as e:
            logger.exception(
                "Compression call failed", extra={"event": "compress_call_error"}
            )
            message = str(e) or "An unexpected error occurred during compression."
            snap.error = message
            self.notifier(message, title="Compression Failed", level="error")
            return False

        finally:
            snap.is_compressing = False

    def redownload(self) -> bool:
        snap = self.snapshot
        if snap.compressed_pdf_uri and snap.file_name:
            self.downloader(snap.compressed_pdf_uri, compressed_filename(snap.file_name))
            self.notifier("Download started again.")
            return True

        self.notifier(
            "No compressed file available to download. Please process a file first.",
            level="error",
        )
        return False
