from __future__ import annotations

from bs4 import BeautifulSoup
from markdown import Markdown

from code_titles.extension import CodeTitlesExtension


def _render_html(markdown_text: str) -> BeautifulSoup:
    md = Markdown(extensions=[CodeTitlesExtension(), "fenced_code"])
    html = md.convert(markdown_text)
    return BeautifulSoup(html, "html.parser")


def _preprocess(lines: list[str]) -> tuple[Markdown, list[str]]:
    md = Markdown(extensions=[CodeTitlesExtension()])
    return md, md.preprocessors["code_titles"].run(lines)


def test_title_div_precedes_rendered_code_block() -> None:
    soup = _render_html("```js:title=hello-world.js\nalert('hello world')\n```")

    title = soup.find("div", class_="gatsby-code-title")
    assert title is not None
    assert title.get_text() == "hello-world.js"

    pre = title.find_next_sibling()
    assert pre is not None and pre.name == "pre"
    assert pre.code["class"] == ["language-js"]
    assert "alert('hello world')" in pre.get_text()


def test_title_after_paragraph_gets_its_own_block() -> None:
    soup = _render_html("Intro\n```js:title=hello-world.js\nalert('hello world')\n```")

    assert soup.find("p").get_text() == "Intro"
    assert soup.find("div", class_="gatsby-code-title") is not None
    assert soup.find("code", class_="language-js") is not None


def test_fences_without_title_are_untouched() -> None:
    lines = [
        "```",
        "var a = 'b'",
        "```",
        "```title=hello-world.js",
        "x",
        "```",
        "```js:clipboard=true",
        "```",
    ]
    md, result = _preprocess(lines)

    assert result == lines
    assert md.htmlStash.html_counter == 0


def test_rewrites_opener_and_stashes_label() -> None:
    md, result = _preprocess(["```js:title=hello-world.js&clipboard=true", "alert('x')", "```"])

    placeholder = md.htmlStash.get_placeholder(0)
    assert result == [placeholder, "", "```js:clipboard=true", "alert('x')", "```"]
    assert md.htmlStash.rawHtmlBlocks == ['<div class="gatsby-code-title">hello-world.js</div>']


def test_indented_fence_keeps_its_indentation() -> None:
    lines = [
        "1. this is a list with an indented code block",
        "    ```js{1,4-6}{numberLines: true}:title=hello-world.js&clipboard=true",
        "    alert('hello world')",
        "    ```",
    ]
    md, result = _preprocess(lines)

    placeholder = md.htmlStash.get_placeholder(0)
    assert result == [
        "1. this is a list with an indented code block",
        "",
        f"    {placeholder}",
        "",
        "    ```js{1,4-6}{numberLines:true}:clipboard=true",
        "    alert('hello world')",
        "    ```",
    ]


def test_fence_content_is_not_reinterpreted() -> None:
    lines = ["````markdown", "```js:title=inner.js", "```", "````", "~~~py:title=outer.py", "~~~"]
    md, result = _preprocess(lines)

    placeholder = md.htmlStash.get_placeholder(0)
    assert result == lines[:4] + ["", placeholder, "", "~~~py", "~~~"]
    assert md.htmlStash.rawHtmlBlocks == ['<div class="gatsby-code-title">outer.py</div>']


def test_extension_loads_by_module_name() -> None:
    md = Markdown(extensions=["code_titles.extension", "fenced_code"])
    html = md.convert("~~~py:title=setup.py\nprint(1)\n~~~")

    assert '<div class="gatsby-code-title">setup.py</div>' in html
    assert 'class="language-py"' in html


def test_indented_code_block_is_left_verbatim() -> None:
    soup = _render_html("Para\n\n    ```js:title=a.js\n    x\n    ```\n")

    assert soup.find("div", class_="gatsby-code-title") is None
    assert soup.find("pre").get_text().startswith("```js:title=a.js")


def test_indented_fence_outside_list_is_not_rewritten() -> None:
    lines = ["Para", "", "    ```js:title=a.js", "    x", "    ```"]
    md, result = _preprocess(lines)

    assert result == lines
    assert md.htmlStash.html_counter == 0


def test_fenced_code_does_not_render_directive_annotations() -> None:
    soup = _render_html("```js:title=a.js&clipboard=true\nx\n```")

    assert soup.find("div", class_="gatsby-code-title").get_text() == "a.js"
    assert soup.find("pre") is None
    assert "js:clipboard=true" in soup.find("code").get_text()
