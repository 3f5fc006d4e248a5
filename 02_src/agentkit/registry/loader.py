"""Markdown agent profile loader.

Expected file layout::

    # Security Auditor Agent

    ## Meta
    - id: security-auditor
    - icon: 🔒
    - model: claude-opus-4-5-20251101
    - tier: powerful

    ## Role
    Short role description

    ## Description
    Longer description

    ## System Prompt
    The instructions text

    ## Capabilities
    - Capability 1
    - Capability 2
"""

import re
from pathlib import Path

from ..logging_config import get_logger
from ..models import AgentProfile, AgentRole, ModelTier, ResponseMode

logger = get_logger(__name__)

_H1 = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_H2 = re.compile(r"^##\s+(.+)$", re.MULTILINE)
_META_LINE = re.compile(r"^[-*]\s*(\w+):\s*(.+)$")
_BULLET = re.compile(r"^[-*]\s+(.+)$")
_AGENT_SUFFIX = re.compile(r"\s+Agent$", re.IGNORECASE)


def split_sections(content: str) -> dict[str, str]:
    """Split markdown into ``{H2 title: body}``."""
    sections = {}
    matches = list(_H2.finditer(content))
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(content)
        sections[match.group(1).strip()] = content[match.end():end].strip()
    return sections


def parse_meta(content: str) -> dict[str, str]:
    meta = {}
    for line in content.splitlines():
        match = _META_LINE.match(line.strip())
        if match:
            meta[match.group(1).lower()] = match.group(2).strip()
    return meta


def parse_bullets(content: str) -> list[str]:
    items = []
    for line in content.splitlines():
        match = _BULLET.match(line.strip())
        if match:
            items.append(match.group(1).strip())
    return items


def parse_agent_markdown(content: str) -> AgentProfile | None:
    """Parse one agent file.

    Returns None when the Meta section has no id or the id is not a known
    role. Unknown tier or response mode values are ignored.
    """
    sections = split_sections(content)
    meta = parse_meta(sections.get("Meta", ""))

    agent_id = meta.get("id")
    if not agent_id:
        logger.warning("Agent markdown missing required id in Meta section")
        return None
    try:
        role = AgentRole(agent_id)
    except ValueError:
        logger.warning("Unknown agent id in markdown: %s", agent_id)
        return None

    name_match = _H1.search(content)
    name = _AGENT_SUFFIX.sub("", name_match.group(1)).strip() if name_match else "Unknown"

    tier = None
    if meta.get("tier"):
        try:
            tier = ModelTier(meta["tier"].lower())
        except ValueError:
            logger.warning("Ignoring unknown tier %r for %s", meta["tier"], agent_id)

    response_mode = None
    if meta.get("response_mode"):
        try:
            response_mode = ResponseMode(meta["response_mode"].lower())
        except ValueError:
            logger.warning(
                "Ignoring unknown response mode %r for %s", meta["response_mode"], agent_id
            )

    description = sections.get("Description") or sections.get("Role", "")

    return AgentProfile(
        role=role,
        name=name,
        instructions=sections.get("System Prompt", ""),
        capabilities=tuple(parse_bullets(sections.get("Capabilities", ""))),
        description=description,
        icon=meta.get("icon", ""),
        model=meta.get("model"),
        model_tier=tier,
        response_mode=response_mode,
        source="file",
    )


def load_agent_files(agents_dir: Path) -> list[AgentProfile]:
    """Load every ``*.md`` profile in a directory, sorted by filename.

    A missing directory yields an empty list. Unreadable or invalid files
    are logged and skipped.
    """
    if not agents_dir.is_dir():
        return []

    profiles = []
    for path in sorted(agents_dir.glob("*.md")):
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Error loading agent from %s: %s", path.name, e)
            continue

        profile = parse_agent_markdown(content)
        if profile is None:
            logger.info("Skipped agent file %s", path.name)
            continue
        profiles.append(profile)

    logger.info("Loaded %s agent profiles from %s", len(profiles), agents_dir)
    return profiles
