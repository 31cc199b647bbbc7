"""QC Buddy - SOP question answering over ingested office documents.

Turns operating-procedure documents (DOCX outlines, PPTX decks, XLSX sheets)
into classified, size-bounded knowledge chunks and answers questions about
them with a lexical ranker and an optional grounded generation step.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
