"""
Texify core: file ingestion, DOCX extraction, prompts, conversion,
editor session state and result presentation.
"""
