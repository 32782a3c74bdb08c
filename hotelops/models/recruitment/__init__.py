from .job_posting import JobPosting

__all__ = ["JobPosting"]
