"""View state for the PDF upload panel."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx

from .api import ApiError, PenguinClient

logger = logging.getLogger("penguin.client")


@dataclass
class SelectedFile:
    name: str
    content: bytes
    content_type: str = "application/pdf"


def _always_confirm(message: str) -> bool:
    return True


@dataclass
class UploadPanel:
    """Mirrors the stored file list and turns user actions into API calls.

    `confirm` is asked before destructive actions and should return True
    to go ahead. Local state is refreshed from the server after uploads;
    deletes only filter the local list, so it can drift from the store if
    someone else changes it meanwhile.
    """
    client: PenguinClient
    confirm: Callable[[str], bool] = _always_confirm
    pdf_files: List[Dict[str, Any]] = field(default_factory=list)
    upload_status: str = ""
    selected_file: Optional[SelectedFile] = None
    clear_status: str = ""
    delete_status: str = ""

    def mount(self) -> None:
        self.fetch_pdf_list()

    def fetch_pdf_list(self) -> None:
        try:
            self.pdf_files = self.client.list_pdfs()
        except (ApiError, httpx.HTTPError) as e:
            logger.error("Error fetching PDF list: %s", e)

    def select_file(self, name: str, content: bytes, content_type: str = "application/pdf") -> None:
        self.selected_file = SelectedFile(name, content, content_type)

    def submit_upload(self) -> None:
        if self.selected_file is None:
            return
        self.upload_status = "Uploading..."
        chosen = self.selected_file
        try:
            self.client.upload_pdf(chosen.name, chosen.content, chosen.content_type)
        except ApiError as e:
            self.upload_status = f"Upload failed: {e.text}"
            return
        except httpx.HTTPError as e:
            logger.error("Error uploading file: %s", e)
            self.upload_status = "Upload failed. Please try again."
            return
        self.upload_status = "Upload successful!"
        self.selected_file = None
        self.fetch_pdf_list()

    def delete_pdf(self, file_id: int, filename: str) -> None:
        if not self.confirm(f'Are you sure you want to delete "{filename}"?'):
            return
        try:
            self.client.delete_pdf(file_id)
        except ApiError as e:
            self.delete_status = f"Failed to delete: {e.text}"
            return
        except httpx.HTTPError as e:
            logger.error("Error deleting PDF: %s", e)
            self.delete_status = "Failed to delete PDF. Please try again."
            return
        self.delete_status = f"Successfully deleted {filename}"
        self.pdf_files = [f for f in self.pdf_files if f.get("id") != file_id]

    def clear_all(self) -> None:
        if not self.confirm("Are you sure you want to clear all PDFs?"):
            return
        try:
            self.client.clear_pdfs()
        except ApiError as e:
            self.clear_status = f"Failed to clear PDFs: {e.text}"
            return
        except httpx.HTTPError as e:
            logger.error("Error clearing PDFs: %s", e)
            self.clear_status = "Failed to clear PDFs. Please try again."
            return
        self.clear_status = "All PDFs cleared successfully"
        self.pdf_files = []
