"""
CLI Package

Command-line interface for AppConfig deployments.
"""

from .commands import AppConfigDeploymentCLI
from .main import main

__all__ = ["AppConfigDeploymentCLI", "main"]
