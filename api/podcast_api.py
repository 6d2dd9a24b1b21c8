"""Typed operations on the Podcast Tracker GraphQL API"""

from typing import Any, Dict, List

from .client import GraphQLClient


HEALTH_QUERY = """
query Health {
  health
}
"""

SEARCH_SHOWS_QUERY = """
query SearchShows($term: String!, $limit: Int, $offset: Int) {
  search(term: $term, limit: $limit, offset: $offset) {
    id
    title
    publisher
    description
    image
    totalEpisodes
  }
}
"""


class PodcastApi:
    """Queries used by the CLI"""

    def __init__(self, client: GraphQLClient):
        self.client = client

    async def health(self) -> str:
        data = await self.client.execute(HEALTH_QUERY)
        return str(data.get("health") or "")

    async def search_shows(self, term: str, limit: int = 15, offset: int = 0) -> List[Dict[str, Any]]:
        data = await self.client.execute(
            SEARCH_SHOWS_QUERY,
            {"term": term, "limit": limit, "offset": offset},
        )
        results = data.get("search")
        return results if isinstance(results, list) else []
