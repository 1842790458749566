"""Parse and rewrite fenced code annotations carrying a ``title`` directive.

A fence annotation follows the shape ``language{options}:key=value&flag``:

- ``language`` is the leading run of characters up to the first ``{``;
- zero or more ``{...}`` groups follow verbatim (line highlights, options);
- after the first top-level ``:``, directives are joined by ``&``.

Only the ``title`` directive is interpreted, every other token is preserved as
written so downstream fence handlers still see it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import re


__all__ = [
    "TITLE_CLASS",
    "CodeAnnotation",
    "parse_annotation",
    "render_title",
    "split_info_string",
]


TITLE_CLASS = "gatsby-code-title"
TITLE_KEY = "title"

_DIRECTIVE_SEPARATOR = "&"
_HEAD_SEPARATOR = ":"
_INFO_SPLIT = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class CodeAnnotation:
    """Structured view over a fence annotation string."""

    language: str
    options: str = ""
    title: str | None = None
    directives: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_title(self) -> bool:
        return self.title is not None

    def without_title(self) -> CodeAnnotation:
        """Return a copy with the title directive cleared."""
        return replace(self, title=None)

    def render(self) -> str:
        """Serialise the annotation back into its normalised string form.

        The title is never written back; it only survives as the label node
        built from :func:`render_title`.
        """
        text = f"{self.language}{self.options}"
        if self.directives:
            text += _HEAD_SEPARATOR + _DIRECTIVE_SEPARATOR.join(self.directives)
        return text


def split_info_string(info: str | None) -> tuple[str | None, str | None]:
    """Split a raw fence info string the way Markdown tree producers do.

    The annotation stops at the first whitespace run and the remainder becomes
    the ``meta`` text. Both halves are ``None`` when absent.
    """
    if info is None:
        return None, None
    stripped = info.strip()
    if not stripped:
        return None, None
    parts = _INFO_SPLIT.split(stripped, maxsplit=1)
    if len(parts) == 1:
        return parts[0], None
    return parts[0], parts[1]


def _split_head(text: str) -> tuple[str, str | None]:
    depth = 0
    for position, char in enumerate(text):
        if char == "{":
            depth += 1
        elif char == "}":
            if depth:
                depth -= 1
        elif char == _HEAD_SEPARATOR and depth == 0:
            return text[:position], text[position + 1 :]
    return text, None


def _split_language(head: str) -> tuple[str, str]:
    brace = head.find("{")
    if brace < 0:
        return head, ""
    return head[:brace], head[brace:]


def parse_annotation(annotation: str | None, meta: str | None = None) -> CodeAnnotation | None:
    """Parse ``annotation`` (glued back to ``meta``) into a :class:`CodeAnnotation`.

    Returns ``None`` when the code block carries no annotation at all. The
    ``meta`` text only exists because producers stop the annotation at the
    first space, so both halves are concatenated before parsing and the
    whitespace left inside ``meta`` is dropped.
    """
    if not annotation:
        return None

    source = annotation + "".join((meta or "").split())
    head, tail = _split_head(source)
    language, options = _split_language(head)

    title: str | None = None
    directives: list[str] = []
    if tail is not None:
        for token in tail.split(_DIRECTIVE_SEPARATOR):
            if not token:
                continue
            key, sep, value = token.partition("=")
            if key == TITLE_KEY and sep and value:
                # Last title wins; earlier ones are dropped as well.
                title = value
                continue
            directives.append(token)

    return CodeAnnotation(
        language=language,
        options=options,
        title=title,
        directives=tuple(directives),
    )


def render_title(title: str) -> str:
    """Return the HTML fragment announcing a code block title.

    The value is inserted verbatim; escaping belongs to whoever renders it.
    """
    return f'<div class="{TITLE_CLASS}">{title}</div>'
