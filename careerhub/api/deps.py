"""
Service dependencies for the route modules.

Routes never build services themselves; tests override these with
services bound to in-memory collections.
"""

from careerhub.services.mongo_service import JOB, TEST, WEBINAR, PostingService, ProfileService


def get_profiles() -> ProfileService:
    return ProfileService()


def get_jobs() -> PostingService:
    return PostingService(JOB)


def get_tests() -> PostingService:
    return PostingService(TEST)


def get_webinars() -> PostingService:
    return PostingService(WEBINAR)
