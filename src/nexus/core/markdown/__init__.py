"""
Markdown parsing for planning documents.

Section extraction and checklist scanning on top of markdown-it's token
stream.
"""

from .checklist import ChecklistItem, ChecklistScan, scan_checklist
from .sections import Section, count_words, extract_sections, section_map, tokenize

__all__ = [
    "ChecklistItem",
    "ChecklistScan",
    "Section",
    "count_words",
    "extract_sections",
    "scan_checklist",
    "section_map",
    "tokenize",
]
