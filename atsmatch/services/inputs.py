from __future__ import annotations

from atsmatch.core.config import settings
from atsmatch.core.errors import InputInvalid, require_text


def validate_texts(job_description: str | None, resume_content: str | None) -> tuple[str, str]:
    """Reject blank or oversized inputs before any computation starts."""
    job = require_text(job_description, "jobDescription")
    resume = require_text(resume_content, "resumeContent")
    for field_name, value in (("jobDescription", job), ("resumeContent", resume)):
        if len(value) > settings.max_text_chars:
            raise InputInvalid(f"{field_name} exceeds {settings.max_text_chars} characters")
    return job, resume
