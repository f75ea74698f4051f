"""
LeetCode question HTML to Markdown converter.

LeetCode serves problem statements as HTML fragments. The sync stores
them as plain text under a small Markdown header (title, difficulty,
tags) so the README renders on GitHub without raw markup.
"""

from typing import Iterable, Optional

from bs4 import BeautifulSoup

from leetcode_sync.errors import ProtocolError

TAG_SEPARATOR = ", "


def html_to_text(raw_html: Optional[str]) -> str:
    """
    Strip markup from an HTML fragment.

    Uses the lenient built-in parser, so unclosed or stray tags still
    yield their text instead of failing.

    Examples:
        "<p>Given an array <code>nums</code></p>" -> "Given an array nums"
        "<p>unclosed <b>bold" -> "unclosed bold"
        None -> ""
    """
    if not raw_html:
        return ""
    if not isinstance(raw_html, str):
        raw_html = str(raw_html)

    soup = BeautifulSoup(raw_html, "html.parser")
    text = soup.get_text()

    # &nbsp; decodes to U+00A0, which renders oddly in code viewers
    return text.replace("\xa0", " ").strip()


def join_tags(tags: Iterable[str]) -> str:
    """Join topic tag names with commas, without a trailing separator."""
    joined = "".join(f"{tag}{TAG_SEPARATOR}" for tag in tags if tag)
    return joined.rstrip(", ")


def question_to_markdown(question: dict) -> str:
    """
    Build the statement document from a `question` GraphQL object.

    Args:
        question: Mapping with title, difficulty, content (HTML) and
                 topicTags ([{"name": ...}]).

    Returns:
        Markdown string ending with a newline.

    Raises:
        ProtocolError: If topicTags is not a list of objects.
    """
    topic_tags = question.get("topicTags") or []
    if not isinstance(topic_tags, list) or not all(isinstance(tag, dict) for tag in topic_tags):
        raise ProtocolError(f"Malformed topic tags: {topic_tags!r}")
    tags = [str(tag.get("name") or "") for tag in topic_tags]

    lines = [
        f"# {question.get('title', '')}",
        "",
        f"**Difficulty**: {question.get('difficulty', '')}",
        "",
        f"**Tags**: {join_tags(tags)}",
        "",
        "---",
        "",
        html_to_text(question.get("content")),
    ]

    return "\n".join(lines) + "\n"
