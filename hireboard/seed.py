"""Demo data: 25 jobs, 1000 candidates and 3 sample assessments."""

from __future__ import annotations

import random
from typing import Any

from .core.models.assessment import (
    AssessmentSection,
    FileUploadQuestion,
    LongTextQuestion,
    MultiChoiceQuestion,
    NumericQuestion,
    ShortTextQuestion,
    SingleChoiceQuestion,
    VisibilityRule,
)
from .core.models.enums import JobStatus, Stage
from .core.models.job import JobDraft
from .core.storage.base import Backend
from .observability.logger import get_logger
from .services.collections import ASSESSMENTS, CANDIDATES, JOBS

logger = get_logger(__name__)

JOB_TITLES = [
    "Senior Frontend Engineer",
    "Backend Developer",
    "Full Stack Developer",
    "DevOps Engineer",
    "Product Manager",
    "UX Designer",
    "Data Scientist",
    "Mobile Developer",
    "Security Engineer",
    "QA Engineer",
    "Technical Writer",
    "Sales Engineer",
    "Customer Success Manager",
    "Marketing Manager",
    "Business Analyst",
    "Project Manager",
    "Software Architect",
    "Site Reliability Engineer",
    "Machine Learning Engineer",
    "Cloud Engineer",
    "Database Administrator",
    "Frontend Developer",
    "iOS Developer",
    "Android Developer",
    "Systems Engineer",
]

TAGS = [
    "React", "TypeScript", "Node.js", "Python", "Java", "AWS", "Docker",
    "Kubernetes", "Remote", "Full-time", "Part-time", "Contract", "Senior",
    "Junior", "Mid-level", "Tech Lead", "Manager", "Director",
]

FIRST_NAMES = [
    "Aarav", "Aditi", "Arjun", "Asha", "Amit", "Anjali", "Anand", "Bhavna",
    "Bharat", "Deepak", "Divya", "Dev", "Ganesh", "Gauri", "Gopal", "Harish",
    "Hema", "Ishan", "Indu", "Jay", "Jyoti", "Karan", "Kavita", "Kiran",
    "Lalit", "Lakshmi", "Mahesh", "Meera", "Manoj", "Maya", "Nikhil", "Neha",
    "Naveen", "Nisha", "Om", "Prakash", "Pooja", "Pranav", "Priya", "Rahul",
    "Rohan", "Ritu", "Rajesh", "Sanjay", "Sita", "Sunil", "Shreya", "Vikram",
]

LAST_NAMES = [
    "Singh", "Kumar", "Patel", "Sharma", "Shah", "Gupta", "Khan", "Verma",
    "Yadav", "Jain", "Mehta", "Reddy", "Rao", "Mishra", "Kapoor", "Thakur",
    "Desai", "Naidu", "Nair", "Malhotra", "Menon", "Joshi", "Pandey", "Das",
    "Bose", "Chopra", "Sinha", "Trivedi", "Saxena", "Iyer", "Murthy", "Kulkarni",
]

JOB_COUNT = 25
CANDIDATE_COUNT = 1000
BATCH_SIZE = 100
ASSESSMENT_COUNT = 3


def build_jobs(rng: random.Random) -> list[dict[str, Any]]:
    jobs = []
    for index, title in enumerate(JOB_TITLES[:JOB_COUNT]):
        draft = JobDraft(
            title=title,
            status=JobStatus.ACTIVE if rng.random() > 0.3 else JobStatus.ARCHIVED,
            tags=rng.sample(TAGS, rng.randint(2, 5)),
            order=index,
            description=f"Looking for an experienced {title} to join our team.",
        )
        jobs.append(draft.with_slug().to_row())
    return jobs


def build_sample_sections() -> list[AssessmentSection]:
    """Three sections covering every question kind and one conditional question."""
    remote = SingleChoiceQuestion(
        question="Are you available for remote work?",
        required=True,
        options=["Yes", "No", "Hybrid"],
    )
    return [
        AssessmentSection(
            title="Technical Skills",
            questions=[
                SingleChoiceQuestion(
                    question="How many years of experience do you have?",
                    required=True,
                    options=["0-1 years", "1-3 years", "3-5 years", "5+ years"],
                ),
                MultiChoiceQuestion(
                    question="Which technologies are you proficient in?",
                    required=True,
                    options=["JavaScript", "TypeScript", "React", "Node.js", "Python", "Java"],
                ),
                NumericQuestion(
                    question="Rate your overall technical skills (1-10)",
                    required=True,
                    min_value=1,
                    max_value=10,
                ),
            ],
        ),
        AssessmentSection(
            title="Experience",
            questions=[
                LongTextQuestion(
                    question="Describe your most challenging project",
                    required=True,
                    max_length=1000,
                ),
                ShortTextQuestion(
                    question="What is your current/most recent job title?",
                    max_length=100,
                ),
            ],
        ),
        AssessmentSection(
            title="Additional Information",
            questions=[
                remote,
                ShortTextQuestion(
                    question="Which time zone do you work from?",
                    required=True,
                    max_length=50,
                    conditional_on=VisibilityRule(question_id=remote.id, value="Yes"),
                ),
                NumericQuestion(
                    question="Expected salary (in thousands)",
                    min_value=50,
                    max_value=300,
                ),
                FileUploadQuestion(question="Upload your resume"),
            ],
        ),
    ]


async def _insert_candidates(backend: Backend, job_ids: list[str], rng: random.Random) -> int:
    stages = list(Stage)
    batch: list[dict[str, Any]] = []
    inserted = 0
    for index in range(CANDIDATE_COUNT):
        first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
        batch.append(
            {
                "name": f"{first} {last}",
                "email": f"{first.lower()}.{last.lower()}{index}@example.com",
                "job_id": rng.choice(job_ids),
                "stage": rng.choice(stages).value,
            }
        )
        if len(batch) == BATCH_SIZE:
            await backend.insert(CANDIDATES, batch)
            inserted += len(batch)
            logger.debug("candidates_seeded", count=inserted)
            batch = []
    if batch:
        await backend.insert(CANDIDATES, batch)
        inserted += len(batch)
    return inserted


async def reseed_candidates(backend: Backend, rng: random.Random | None = None) -> int:
    """Insert a fresh batch of candidates spread over the existing jobs.

    Raises:
        RuntimeError: If there are no jobs to attach candidates to
    """
    rng = rng or random.Random()
    jobs = await backend.fetch_page(JOBS)
    if not jobs.rows:
        raise RuntimeError("No jobs found; seed jobs first")
    count = await _insert_candidates(backend, [row["id"] for row in jobs.rows], rng)
    logger.info("candidates_reseeded", count=count)
    return count


async def seed_database(backend: Backend, rng: random.Random | None = None) -> dict[str, int]:
    """Populate an empty backend with demo data.

    Existing jobs are left alone; candidates are only added when there are
    none.

    Returns:
        Number of rows written per collection
    """
    rng = rng or random.Random()
    written = {JOBS: 0, CANDIDATES: 0, ASSESSMENTS: 0}

    existing_jobs = await backend.fetch_page(JOBS, limit=1)
    if existing_jobs.count:
        existing_candidates = await backend.fetch_page(CANDIDATES, limit=1)
        if not existing_candidates.count:
            written[CANDIDATES] = await reseed_candidates(backend, rng)
        else:
            logger.info("seed_skipped", reason="already seeded")
        return written

    jobs = await backend.insert(JOBS, build_jobs(rng))
    written[JOBS] = len(jobs)
    written[CANDIDATES] = await _insert_candidates(backend, [job["id"] for job in jobs], rng)

    assessments = []
    for job in rng.sample(jobs, ASSESSMENT_COUNT):
        sections = [s.to_row(exclude_none=True) for s in build_sample_sections()]
        assessments.append({"job_id": job["id"], "title": f"{job['title']} Assessment", "sections": sections})
    await backend.insert(ASSESSMENTS, assessments)
    written[ASSESSMENTS] = len(assessments)

    logger.info("database_seeded", **written)
    return written
