"""Markdown extension announcing fenced code titles with a label block.

````markdown
```js:title=hello-world.js&clipboard=true
alert('hello world')
```
````

becomes a ``<div class="gatsby-code-title">hello-world.js</div>`` block
followed by a fence annotated ``js:clipboard=true``. Fences that keep
directives or ``{...}`` options need a downstream fence handler accepting that
annotation; the stock ``fenced_code`` extension only renders plain ``js``.

Fences indented by four spaces or more are only considered inside list
items, anywhere else they belong to an indented code block.
"""

from __future__ import annotations

import logging
import re

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

from code_titles.annotation import parse_annotation, render_title, split_info_string


logger = logging.getLogger(__name__)


class _CodeTitlesPreprocessor(Preprocessor):
    """Rewrite titled fence openers and stash their label ahead of them."""

    _FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
    _LIST_ITEM_RE = re.compile(r"^[ \t]{0,3}(?:[-*+]|\d{1,9}[.)])(?:[ \t]|$)")

    def run(self, lines: list[str]) -> list[str]:  # type: ignore[override]
        result: list[str] = []
        fence_char: str | None = None
        fence_len = 0
        in_list = False

        for line in lines:
            match = self._FENCE_RE.match(line)

            if fence_char is not None:
                if match is not None:
                    fence = match.group("fence")
                    closes = fence[0] == fence_char and len(fence) >= fence_len
                    if closes and not match.group("info").strip():
                        fence_char = None
                        fence_len = 0
                result.append(line)
                continue

            if self._LIST_ITEM_RE.match(line):
                in_list = True
            elif line.strip() and not line[0].isspace():
                in_list = False

            if match is None or not self._opens_fence(match, in_list=in_list):
                result.append(line)
                continue

            fence = match.group("fence")
            fence_char = fence[0]
            fence_len = len(fence)
            result.extend(self._rewrite_opener(match, previous=result[-1] if result else ""))

        return result

    def _opens_fence(self, match: re.Match[str], *, in_list: bool) -> bool:
        # Backtick fences cannot carry backticks in their info string.
        if match.group("fence")[0] == "`" and "`" in match.group("info"):
            return False
        # Deeper indentation outside a list item is an indented code block.
        return in_list or len(match.group("indent").expandtabs(4)) <= 3

    def _rewrite_opener(self, match: re.Match[str], *, previous: str) -> list[str]:
        line = match.group(0)
        annotation, meta = split_info_string(match.group("info"))
        parsed = parse_annotation(annotation, meta)
        if parsed is None or parsed.title is None or not parsed.language:
            return [line]

        indent = match.group("indent")
        placeholder = self.md.htmlStash.store(render_title(parsed.title))
        rewritten = f"{indent}{match.group('fence')}{parsed.without_title().render()}"
        logger.debug("Code title %r extracted from fence %r.", parsed.title, line.strip())

        output: list[str] = []
        if previous.strip():
            output.append("")
        output.extend([f"{indent}{placeholder}", "", rewritten])
        return output


class CodeTitlesExtension(Extension):
    """Register the fence title preprocessor ahead of the fence handlers."""

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        md.preprocessors.register(_CodeTitlesPreprocessor(md), "code_titles", priority=28)


def makeExtension(**_: object) -> CodeTitlesExtension:  # noqa: N802
    return CodeTitlesExtension()


__all__ = ["CodeTitlesExtension", "makeExtension"]
