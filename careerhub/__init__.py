"""
CareerHub Placement Portal
Students apply to jobs and register for tests and webinars; administrators
manage postings and review applicants.

Architecture:
- MongoDB: profiles and postings with embedded applicant lists
- JWT bearer tokens: the caller's email is the acting identity
- Media host: resumes/PDFs uploaded out-of-band, URLs stored verbatim
"""

__version__ = "1.0.0"
