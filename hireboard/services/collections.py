"""Backend table names."""

JOBS = "jobs"
CANDIDATES = "candidates"
TIMELINE = "candidate_timeline"
ASSESSMENTS = "assessments"
RESPONSES = "assessment_responses"
NOTES = "candidate_notes"
