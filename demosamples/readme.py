from __future__ import annotations

import html
import re

import markdown

FENCED_BLOCK_PATTERN = re.compile(
    r"`{3}(?P<language>[^`\r\n]*)[\r\n]+(?P<content>.*?)[\r\n]*`{3}",
    re.DOTALL,
)


def _render_fence(match: re.Match, keep_language: bool) -> str:
    body = match.group("content").strip("\r\n")
    language = match.group("language").strip()
    if keep_language and language:
        return f'<pre><code class="language-{language}">{body}</code></pre>'
    return f"<pre><code>{body}</code></pre>"


def extract_readme(content: str, *, keep_language: bool = False) -> str:
    """Turn raw README markdown into HTML that is safe to embed in a page.

    The whole document is HTML-encoded before rendering so that markup
    written in the README shows up as text. Fenced code blocks are swapped
    for ``<pre><code>`` blocks, which Python-Markdown passes through as raw
    HTML. The fence's language tag is dropped unless ``keep_language`` is
    set, in which case it becomes a ``language-*`` class on ``<code>``.
    """
    if not content or not content.strip():
        return ""

    content = html.escape(content, quote=True)
    content = FENCED_BLOCK_PATTERN.sub(
        lambda match: _render_fence(match, keep_language), content
    )
    return markdown.markdown(content)
