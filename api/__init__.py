"""Authenticated access to the Podcast Tracker GraphQL API"""

from .client import GraphQLClient, normalize_api_error
from .podcast_api import PodcastApi

__all__ = [
    "GraphQLClient",
    "PodcastApi",
    "normalize_api_error",
]
