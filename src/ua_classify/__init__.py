"""Rule-based user-agent classification.

Turns a raw ``User-Agent`` header into a browser family and version, an
operating system family and version, and mobile/tablet flags.
"""

from .classifier import UserAgentClassifier, classify
from .environment import (
    Environment,
    FeatureDetector,
    ProcessEnvironment,
    StaticEnvironment,
)
from .models import OS, Browser, Classification

__all__ = [
    "OS",
    "Browser",
    "Classification",
    "Environment",
    "FeatureDetector",
    "ProcessEnvironment",
    "StaticEnvironment",
    "UserAgentClassifier",
    "classify",
]
