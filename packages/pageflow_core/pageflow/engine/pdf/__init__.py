"""
PDF compilation module for producing PDF files from a LayoutResult.
"""

from .pdf_compiler import PDFCompiler

__all__ = ["PDFCompiler"]
