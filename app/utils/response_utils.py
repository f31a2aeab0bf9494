"""
Helpers for bot response content.

Each sequence fragment holds a YAML document in `content`, e.g.
`text: "Hello"`. The UI renders `text` as markdown, where a single
newline is not a line break, so single newlines are doubled on save.
"""

import re
from typing import Any, Dict, Iterable, List

import yaml

_SINGLE_NEWLINE = re.compile(r"(?<!\n)\n(?!\n)")


def dump_content(content: Dict[str, Any]) -> str:
    return yaml.safe_dump(content, allow_unicode=True, sort_keys=False)


def default_content(key: str) -> str:
    """Placeholder content of a new response: its own key as text."""
    return dump_content({"text": key})


def add_newlines(text: str) -> str:
    return _SINGLE_NEWLINE.sub("\n\n", text)


def format_newlines(sequence: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Double the single newlines of every fragment's `text`.

    Raises yaml.YAMLError when a fragment's content is not valid YAML.
    """
    formatted = []
    for item in sequence:
        content = yaml.safe_load(item.get("content") or "")
        if isinstance(content, dict) and isinstance(content.get("text"), str):
            content["text"] = add_newlines(content["text"])
            item = {**item, "content": dump_content(content)}
        formatted.append(item)
    return formatted


def get_template_languages(templates: Iterable[Dict[str, Any]]) -> List[str]:
    """Sorted distinct languages used across templates."""
    langs = set()
    for template in templates:
        for value in template.get("values") or []:
            if value.get("lang"):
                langs.add(value["lang"])
    return sorted(langs)
