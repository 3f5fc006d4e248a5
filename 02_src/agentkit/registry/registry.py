"""AgentRegistry implementation."""

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from ..logging_config import get_logger
from ..models import AgentProfile, AgentRole
from .builtin import BUILTIN_PROFILES
from .loader import load_agent_files

logger = get_logger(__name__)


class IAgentRegistry(Protocol):
    """Lookup of agent profiles by role."""

    def get_profile(self, role: AgentRole) -> AgentProfile | None:
        """Get the profile of a role, if one is defined."""
        ...

    def list_profiles(self) -> list[AgentProfile]:
        """Get all profiles."""
        ...


class AgentRegistry:
    """Built-in profiles merged with markdown overrides.

    File profiles win over built-ins with the same role.
    """

    def __init__(
        self,
        builtin: Iterable[AgentProfile] = BUILTIN_PROFILES,
        agents_dir: Path | None = None,
    ):
        self._builtin = tuple(builtin)
        self._agents_dir = agents_dir
        self._profiles: dict[AgentRole, AgentProfile] = {}
        self.reload()

    def reload(self) -> None:
        """Rebuild the profile table from built-ins and the agents directory."""
        profiles = {profile.role: profile for profile in self._builtin}
        if self._agents_dir is not None:
            for profile in load_agent_files(self._agents_dir):
                if profile.role in profiles:
                    logger.info("Agent %s overridden from file", profile.role.value)
                profiles[profile.role] = profile
        self._profiles = profiles

    def get_profile(self, role: AgentRole) -> AgentProfile | None:
        return self._profiles.get(role)

    def list_profiles(self) -> list[AgentProfile]:
        return list(self._profiles.values())
