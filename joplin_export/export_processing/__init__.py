"""
Export processing module for joplin-export.

This module handles the complete mail-to-note pipeline with separated concerns:
- ContentSelector: Choosing the selection, HTML or plain text body
- FieldNormalizer: Trimming and formatting header fields for templates
- NoteUploader: Note creation and header insertion
- TagResolver: Finding, creating and attaching tags
- AttachmentUploader: Uploading attachments as resources
- ExportProcessor: Overall workflow orchestration
"""

from .attachment_uploader import AttachmentUploader
from .content_selector import ContentSelector, get_mail_content
from .joplin_client import JoplinClient
from .normalizer import FieldNormalizer
from .note_uploader import NoteUploader
from .processor import ExportProcessor
from .renderer import only_whitespace, render_template
from .tag_resolver import TagResolver

__all__ = [
    "AttachmentUploader",
    "ContentSelector",
    "ExportProcessor",
    "FieldNormalizer",
    "JoplinClient",
    "NoteUploader",
    "TagResolver",
    "get_mail_content",
    "only_whitespace",
    "render_template",
]
