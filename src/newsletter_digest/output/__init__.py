"""Writers for day files and reviewer pages."""

from newsletter_digest.output.review import render_review_html, save_review_files
from newsletter_digest.output.storage import save_day_files

__all__ = [
    "render_review_html",
    "save_day_files",
    "save_review_files",
]
