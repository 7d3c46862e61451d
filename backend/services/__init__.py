"""Services for the Stapler document service."""
from .layout_engine import layout, wrap_words, split_paragraphs, derive_title
from .pdf_writer import render_pdf, text_to_pdf
from .pdf_tools import image_to_pdf, photos_to_pdf, merge_pdfs, placeholder_pdf, PdfToolError, UnsupportedFileError
from .document_converter import DocumentConverter, FileTooLargeError
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError

__all__ = ['layout', 'wrap_words', 'split_paragraphs', 'derive_title', 'render_pdf', 'text_to_pdf', 'image_to_pdf', 'photos_to_pdf', 'merge_pdfs', 'placeholder_pdf', 'PdfToolError', 'UnsupportedFileError', 'DocumentConverter', 'FileTooLargeError', 'LLMClient', 'LLMResponse', 'LLMError', 'LLMClientError']
