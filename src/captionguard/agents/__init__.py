"""Agents package for captionguard."""

from .base import Agent
from .compliance_reviewer import ComplianceReviewer
from .hashtag_selector import HashtagSelector

__all__ = ["Agent", "ComplianceReviewer", "HashtagSelector"]
