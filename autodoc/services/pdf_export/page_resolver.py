"""
Page Resolver

Maps 1-based page numbers from annotation records onto zero-based page
indexes of the working document.
"""

from typing import Optional


def resolve_page_index(page_number: int, page_count: int) -> Optional[int]:
    """
    Resolve a 1-based page number to a zero-based page index.

    Args:
        page_number: Page number as stored on the annotation
        page_count: Number of pages in the document

    Returns:
        Zero-based index, or None when the page is out of range and the
        annotation should be skipped
    """
    if 1 <= page_number <= page_count:
        return page_number - 1
    return None
