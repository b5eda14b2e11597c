"""
bpmn2klaim Tools

Command-line interface for the X-Klaim generator.
"""

from bpmn2klaim.tools.cli import cli

__all__ = ["cli"]
