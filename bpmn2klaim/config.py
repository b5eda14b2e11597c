"""
Generator Configuration Schema

Defines configuration for the X-Klaim generator: how unhandled element
variants are treated and how the collaboration net is named.
"""

import os
from dataclasses import dataclass
from enum import Enum


class UnhandledVariantPolicy(str, Enum):
    """What to do with an element whose variant has no translation routine."""

    SKIP = "skip"  # Element contributes nothing, walk stops on that path
    ABORT = "abort"  # Raise UnresolvedVariantError


class OutputFormat(str, Enum):
    """Output format for the CLI."""

    TEXT = "text"
    JSON = "json"


@dataclass
class GeneratorConfig:
    """Complete generator configuration."""

    # Error Handling
    unhandled_policy: UnhandledVariantPolicy = UnhandledVariantPolicy.SKIP

    # Collaboration net
    net_name: str = "Net"
    net_address: str = "tcp-127.0.0.1:9999"

    # Output
    output_format: OutputFormat = OutputFormat.TEXT

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Create generator config from environment variables.

        Returns:
            GeneratorConfig instance
        """
        try:
            policy = UnhandledVariantPolicy(
                os.getenv("BPMN2KLAIM_UNHANDLED_POLICY", "skip").lower()
            )
        except ValueError:
            policy = UnhandledVariantPolicy.SKIP

        return cls(
            unhandled_policy=policy,
            net_name=os.getenv("BPMN2KLAIM_NET_NAME", "Net"),
            net_address=os.getenv("BPMN2KLAIM_NET_ADDRESS", "tcp-127.0.0.1:9999"),
        )
