"""Repository analysis backed by the completion endpoint."""

from .key_files import KeyFileSelector, parse_key_files
from .project import InspectionResult, ProjectAnalyzer

__all__ = ["InspectionResult", "KeyFileSelector", "ProjectAnalyzer", "parse_key_files"]
