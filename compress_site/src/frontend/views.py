# compress_site/src/frontend/views.py

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from src.api.logging_utils import build_request_context, get_logger

from .file_utils import build_download_response
from .forms import COMPRESSION_OPTIONS, CompressionLevelForm, SelectPDFForm
from .workflow import CompressWorkflow, WorkflowSnapshot, compressed_filename

logger = get_logger(__name__)

SESSION_KEY = "compress_workflow"

MESSAGE_LEVELS = {
    "info": messages.INFO,
    "success": messages.SUCCESS,
    "warning": messages.WARNING,
    "error": messages.ERROR,
}


class MessagesNotifier:
    """Shows workflow notices through the Django messages framework."""

    def __init__(self, request):
        self.request = request

    def __call__(self, description, title=None, level="info"):
        text = f"{title}: {description}" if title else description
        messages.add_message(
            self.request, MESSAGE_LEVELS.get(level, messages.INFO), text
        )


class SessionDownloadTrigger:
    """Marks a download as pending; the next page render starts it."""

    def __init__(self, snapshot: WorkflowSnapshot):
        self.snapshot = snapshot

    def __call__(self, data_uri, filename):
        self.snapshot.pending_download = filename


def load_snapshot(request) -> WorkflowSnapshot:
    return WorkflowSnapshot.from_dict(request.session.get(SESSION_KEY))


def save_snapshot(request, snapshot: WorkflowSnapshot):
    request.session[SESSION_KEY] = snapshot.to_dict()
    request.session.modified = True


def get_workflow(request) -> CompressWorkflow:
    snapshot = load_snapshot(request)

    def persist(snap):
        save_snapshot(request, snap)
        request.session.save()

    return CompressWorkflow(
        snapshot=snapshot,
        notifier=MessagesNotifier(request),
        downloader=SessionDownloadTrigger(snapshot),
        persist=persist,
    )


def compress_pdf_page(request):
    """Compress PDF page."""
    snapshot = load_snapshot(request)
    pending_download = snapshot.pending_download
    reset_file_input = snapshot.reset_file_input

    # Rendered once; a reload must not start the download again.
    if reset_file_input or pending_download:
        snapshot.reset_file_input = False
        snapshot.pending_download = None
        save_snapshot(request, snapshot)

    context = {
        "page_title": "Compress PDF File",
        "page_subtitle": "Reduce the file size of your PDF while maintaining quality. "
        "This tool processes one PDF at a time.",
        "workflow": snapshot,
        "state": snapshot.state.value,
        "compression_options": COMPRESSION_OPTIONS,
        "select_form": SelectPDFForm(),
        "pending_download": pending_download,
        "reset_file_input": reset_file_input,
        "can_compress": bool(snapshot.file_name and snapshot.pdf_data_uri)
        and not snapshot.is_compressing,
    }
    return render(request, "frontend/compress_pdf.html", context)


@require_POST
def select_file(request):
    form = SelectPDFForm(request.POST, request.FILES)
    workflow = get_workflow(request)
    files = request.FILES.getlist("pdf_file")

    if not files:
        logger.info(
            "File selection without a file",
            extra={**build_request_context(request), "event": "file_missing"},
        )
        messages.error(request, "Please select a PDF file.")
        return redirect("compress_pdf_page")

    source = form.cleaned_data["source"] if form.is_valid() else "picker"
    logger.info(
        "PDF selected on page",
        extra={
            **build_request_context(request, uploaded_file=files[0], source=source),
            "event": "page_select",
            "file_count": len(files),
        },
    )
    workflow.select_files(files, source=source)
    save_snapshot(request, workflow.snapshot)
    return redirect("compress_pdf_page")


@require_POST
def remove_file(request):
    workflow = get_workflow(request)
    workflow.remove_file()
    save_snapshot(request, workflow.snapshot)
    return redirect("compress_pdf_page")


@require_POST
def set_level(request):
    workflow = get_workflow(request)
    form = CompressionLevelForm(request.POST)
    if form.is_valid() and form.cleaned_data["compression_level"]:
        workflow.set_compression_level(form.cleaned_data["compression_level"])
        save_snapshot(request, workflow.snapshot)
    return redirect("compress_pdf_page")


@require_POST
def run_compression(request):
    workflow = get_workflow(request)

    form = CompressionLevelForm(request.POST)
    if form.is_valid() and form.cleaned_data["compression_level"]:
        workflow.set_compression_level(form.cleaned_data["compression_level"])

    context = build_request_context(
        request,
        compression_level=workflow.snapshot.compression_level,
        workflow_state=workflow.state.value,
    )
    logger.info("Compression requested from page", extra={**context, "event": "page_compress"})

    workflow.compress()
    save_snapshot(request, workflow.snapshot)
    return redirect("compress_pdf_page")


@require_POST
def redownload(request):
    workflow = get_workflow(request)
    workflow.redownload()
    save_snapshot(request, workflow.snapshot)
    return redirect("compress_pdf_page")


@require_GET
def download(request):
    """Serve the stored result as ``compressed_<original name>``."""
    snapshot = load_snapshot(request)
    if not snapshot.compressed_pdf_uri or not snapshot.file_name:
        messages.error(
            request,
            "No compressed file available to download. Please process a file first.",
        )
        return redirect("compress_pdf_page")

    snapshot.pending_download = None
    save_snapshot(request, snapshot)

    response = build_download_response(
        snapshot.compressed_pdf_uri, compressed_filename(snapshot.file_name)
    )
    if snapshot.stats is not None:
        response["X-Input-Size"] = str(snapshot.stats.original_size)
        response["X-Output-Size"] = str(snapshot.stats.compressed_size)
        response["X-Compression-Ratio"] = f"{snapshot.stats.reduction_percentage:.2f}"
    response["X-Compression-Level"] = snapshot.compression_level
    return response
