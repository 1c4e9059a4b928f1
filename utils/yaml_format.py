"""YAML rendering for embedding records in larger documents (e.g. front matter blocks)."""

import yaml

from config import YAML_INDENT


def obj_to_yaml(obj, global_indent: int = YAML_INDENT) -> str:
    """Dump obj as block-style YAML (key order kept) and indent every non-empty line by global_indent spaces."""
    text = yaml.safe_dump(obj, sort_keys=False, allow_unicode=True, default_flow_style=False)
    spaces = " " * global_indent if global_indent > 0 else ""
    return "\n".join(spaces + line if line else line for line in text.split("\n"))
