"""Admin collection and public catalogue wrappers."""

from __future__ import annotations

from typing import Any

from cineghar.client import endpoints
from cineghar.client.http import ApiClient


class ResourceApi:
    """CRUD for one ``/api/admin/*`` collection."""

    def __init__(self, client: ApiClient, path: str) -> None:
        self.client = client
        self.path = path

    def list(self, page: int | None = None, limit: int | None = None) -> dict[str, Any]:
        return self.client.get(self.path, params={"page": page, "limit": limit})

    def get(self, obj_id: int) -> dict[str, Any]:
        return self.client.get(endpoints.by_id(self.path, obj_id))

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self.client.post(self.path, json=payload)

    def update(self, obj_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        return self.client.put(endpoints.by_id(self.path, obj_id), json=payload)

    def delete(self, obj_id: int) -> dict[str, Any]:
        return self.client.delete(endpoints.by_id(self.path, obj_id))


def users(client: ApiClient) -> ResourceApi:
    return ResourceApi(client, endpoints.ADMIN_USERS)


def offers(client: ApiClient) -> ResourceApi:
    return ResourceApi(client, endpoints.ADMIN_OFFERS)


def halls(client: ApiClient) -> ResourceApi:
    return ResourceApi(client, endpoints.ADMIN_HALLS)


def movies(client: ApiClient) -> ResourceApi:
    return ResourceApi(client, endpoints.ADMIN_MOVIES)


def showtimes(client: ApiClient) -> ResourceApi:
    return ResourceApi(client, endpoints.ADMIN_SHOWTIMES)


class MoviesApi:
    """Public catalogue, no admin role needed."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def list(
        self,
        page: int | None = None,
        limit: int | None = None,
        q: str | None = None,
        genre: str | None = None,
    ) -> dict[str, Any]:
        return self.client.get(
            endpoints.MOVIES, params={"page": page, "limit": limit, "q": q, "genre": genre}
        )

    def get(self, movie_id: int) -> dict[str, Any]:
        return self.client.get(endpoints.by_id(endpoints.MOVIES, movie_id))

    def showtimes(self, movie_id: int) -> dict[str, Any]:
        return self.client.get(endpoints.movie_showtimes(movie_id))
