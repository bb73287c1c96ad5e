"""Enum types for the string-typed status columns of the Cona tables."""

from enum import Enum


class CVStatus(str, Enum):
    """Review outcome of a CV, set by an admin."""
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class InterviewStatus(str, Enum):
    """Lifecycle status of an interview."""
    scheduled = "scheduled"
    confirmed = "confirmed"
    declined = "declined"


class JobStatus(str, Enum):
    """Visibility of a job posting on the applicant job board."""
    active = "active"
    inactive = "inactive"


class SortCriteria(str, Enum):
    """Sort keys offered on the CV sorting page."""
    experience = "experience"
    skills = "skills"
    rating = "rating"
    name = "name"
    date = "date"


class SortOrder(str, Enum):
    """Sort direction."""
    asc = "asc"
    desc = "desc"
