"""Code block titles for Markdown fences and mdast trees."""

from __future__ import annotations

from code_titles.annotation import (
    TITLE_CLASS,
    CodeAnnotation,
    parse_annotation,
    render_title,
    split_info_string,
)
from code_titles.extension import CodeTitlesExtension
from code_titles.mdast import build_label, transform, visit
from code_titles.version import get_version


__version__ = get_version()

__all__ = [
    "TITLE_CLASS",
    "CodeAnnotation",
    "CodeTitlesExtension",
    "__version__",
    "build_label",
    "get_version",
    "parse_annotation",
    "render_title",
    "split_info_string",
    "transform",
    "visit",
]
