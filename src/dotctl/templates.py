"""Per-system conditional blocks in ``*.template`` files.

A template is plain text with optional blocks::

    export EDITOR=vim
    {{#if macos}}
    export BROWSER=open
    {{/if}}

Lines inside a block are kept only when the condition matches the current
system. Marker lines are never written out. Blocks do not nest.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .system import template_condition_matches

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".template"
BLOCK_OPEN = "{{#if "
BLOCK_CLOSE = "{{/if}}"


def is_template(path: Path) -> bool:
    # A file named just ".template" has no output name
    return path.name.endswith(TEMPLATE_SUFFIX) and path.name != TEMPLATE_SUFFIX


def output_path_for(path: Path) -> Path:
    """Where a template expands to: same directory, suffix dropped."""
    return path.with_name(path.name[: -len(TEMPLATE_SUFFIX)])


def expand_content(content: str, system: str) -> str:
    lines = content.split("\n")
    result = []
    skip_block = False

    for line in lines:
        trimmed = line.strip()

        if trimmed.startswith(BLOCK_OPEN) and trimmed.endswith("}}"):
            condition = trimmed[len(BLOCK_OPEN):-2].strip()
            skip_block = not template_condition_matches(condition, system)
            continue

        if trimmed == BLOCK_CLOSE:
            skip_block = False
            continue

        if not skip_block:
            result.append(line)

    return "\n".join(result)


def expand_file(
    source: Path, system: str, output: Optional[Path] = None
) -> Path:
    """Expand one template file and write the result.

    Returns the path written.
    """
    target = output or output_path_for(source)
    # Undecodable bytes pass through untouched
    content = source.read_text(encoding="utf-8", errors="surrogateescape")
    target.write_text(
        expand_content(content, system),
        encoding="utf-8",
        errors="surrogateescape",
    )
    logger.debug(f"Expanded {source} -> {target}")
    return target


def find_templates(root: Path) -> List[Path]:
    return sorted(
        p
        for p in root.rglob(f"*{TEMPLATE_SUFFIX}")
        if p.is_file() and is_template(p)
    )


def expand_tree(
    root: Path, system: str, dry_run: bool = False
) -> List[Tuple[Path, Path]]:
    """Expand every template under ``root`` next to itself.

    Returns (template, output) pairs. In dry-run mode nothing is written.
    """
    expanded = []
    for template in find_templates(root):
        output = output_path_for(template)
        if not dry_run:
            expand_file(template, system, output)
        expanded.append((template, output))
    return expanded
