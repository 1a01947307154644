"""Enumeration types for Hireboard models."""

from enum import Enum


class JobStatus(str, Enum):
    """Job posting status."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class Stage(str, Enum):
    """Candidate pipeline stages, in board order."""

    APPLIED = "applied"
    SCREEN = "screen"
    TECH = "tech"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


class QuestionType(str, Enum):
    """Assessment question kinds."""

    SINGLE_CHOICE = "single-choice"
    MULTI_CHOICE = "multi-choice"
    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    NUMERIC = "numeric"
    FILE_UPLOAD = "file-upload"
