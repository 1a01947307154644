"""Hireboard: applicant tracking client for jobs, candidate pipelines and assessments."""

__version__ = "0.3.0"
