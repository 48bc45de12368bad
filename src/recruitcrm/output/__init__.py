"""Output generation for reports (PDF, text)."""

from recruitcrm.output.pdf_generator import PDFGenerator
from recruitcrm.output.text_generator import TextReportGenerator

__all__ = [
    "PDFGenerator",
    "TextReportGenerator",
]
