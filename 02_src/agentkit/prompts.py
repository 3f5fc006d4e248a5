"""Prompt construction for agent invocations."""

from collections.abc import Mapping

from .models import AgentProfile, ResponseMode

RESPONSE_MODE_HINTS = {
    ResponseMode.CONCISE: "Keep answers short and focused",
    ResponseMode.BALANCED: "Give standard-length answers",
    ResponseMode.DETAILED: "Give comprehensive, in-depth answers",
}


class PromptBuilder:
    """Builds the text sent to workers."""

    def build_system_context(self, profile: AgentProfile) -> str:
        """Identity, capabilities, instructions and output guidelines of a profile."""
        parts = [f"# You are: {profile.name}", f"**Role:** {profile.description}"]

        if profile.capabilities:
            parts.append("\n**Your Capabilities:**")
            parts.extend(f"- {capability}" for capability in profile.capabilities)

        parts.append("\n**Instructions:**")
        parts.append(profile.instructions)

        parts.append("\n**Output Guidelines:**")
        parts.append("- Be concise and actionable")
        parts.append("- Use markdown formatting for clarity")
        parts.append("- If you encounter errors, explain them clearly")
        parts.append("- Always provide complete, working solutions")
        if profile.response_mode is not None:
            parts.append(f"- {RESPONSE_MODE_HINTS[profile.response_mode]}")

        return "\n".join(parts)

    def build_prompt(self, profile: AgentProfile, request: str) -> str:
        """Full prompt for a fresh invocation."""
        return f"{self.build_system_context(profile)}\n\n---\n\n**User Request:**\n{request}"

    def build_request_only(self, request: str) -> str:
        """Prompt for a resumed conversation; the worker already has the instructions."""
        return request

    def build_chain_context(self, outputs_by_name: Mapping[str, str]) -> str:
        """Context block of earlier outputs in a sequential chain.

        Returns an empty string when there are no earlier outputs.
        """
        if not outputs_by_name:
            return ""

        parts = ["\n---\n**Context from Previous Agents:**"]
        for name, output in outputs_by_name.items():
            parts.append(f"\n### Output from {name}:")
            parts.append("```")
            parts.append(output)
            parts.append("```")
        return "\n".join(parts)

    def build_aggregation_prompt(
        self, outputs: Mapping[str, str], original_task: str
    ) -> str:
        """Prompt asking the aggregator to synthesize collected outputs."""
        parts = [
            "# Aggregation Task",
            f"\n**Original Request:** {original_task}",
            "\n**Collected Outputs from Agents:**",
        ]
        for source, output in outputs.items():
            parts.append(f"\n## From {source}:")
            parts.append("```")
            parts.append(output)
            parts.append("```")

        parts.append("\n---")
        parts.append("\n**Your Task:**")
        parts.append("Synthesize all the above outputs into a coherent, unified response.")
        parts.append(
            "Identify key insights, resolve any conflicts, "
            "and provide actionable recommendations."
        )
        return "\n".join(parts)

    def build_retry_prompt(
        self, profile: AgentProfile, failed_prompt: str, error: str, attempt: int
    ) -> str:
        """Prompt for retry number ``attempt`` after a failure."""
        parts = [
            self.build_system_context(profile),
            "\n---",
            f"\n**RETRY ATTEMPT {attempt}**",
            "\nThe previous attempt failed with the following error:",
            "```",
            error,
            "```",
            "\n**Original Request:**",
            failed_prompt,
            "\nPlease try again, addressing the error above.",
        ]
        return "\n".join(parts)
