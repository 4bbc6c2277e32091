"""Integration tests for the public artist directory."""

from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from gigslk.api.middleware.error_handler import FetchError

PERFORMERS = [
    {"id": 1, "full_name": "Nimal Perera", "stage_name": "DJ Nimal", "location": "Colombo", "rating": 4.8},
    {"id": 2, "full_name": "Kamala Silva", "location": "Kandy", "performance_type": "Vocalist", "rating": 3.9},
]


class TestArtistDirectory:
    """Tests for /artists."""

    def test_list_is_public(self, client: TestClient, mock_api: AsyncMock) -> None:
        """Test that the listing needs no session."""
        mock_api.list_performers.return_value = [dict(p) for p in PERFORMERS]

        response = client.get("/api/v1/artists")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["artists"][0]["name"] == "DJ Nimal"
        assert data["artists"][1]["category"] == "Vocalist"

    def test_search_filters(self, client: TestClient, mock_api: AsyncMock) -> None:
        """Test the search and filter parameters."""
        mock_api.list_performers.return_value = [dict(p) for p in PERFORMERS]

        data = client.get("/api/v1/artists", params={"q": "kandy"}).json()
        assert [artist["id"] for artist in data["artists"]] == ["2"]

        data = client.get("/api/v1/artists", params={"min_rating": 4}).json()
        assert [artist["id"] for artist in data["artists"]] == ["1"]

    def test_min_rating_out_of_range(self, client: TestClient, mock_api: AsyncMock) -> None:
        """Test that a rating above 5 is rejected."""
        assert client.get("/api/v1/artists", params={"min_rating": 6}).status_code == 422

    def test_get_artist(self, client: TestClient, mock_api: AsyncMock) -> None:
        """Test fetching one artist."""
        mock_api.list_performers.return_value = [dict(p) for p in PERFORMERS]

        response = client.get("/api/v1/artists/2")

        assert response.status_code == 200
        assert response.json()["bio"] == "No bio provided."

    def test_unknown_artist(self, client: TestClient, mock_api: AsyncMock) -> None:
        """Test that an unknown artist returns 404."""
        mock_api.list_performers.return_value = []

        response = client.get("/api/v1/artists/9")

        assert response.status_code == 404
        assert response.json()["message"] == "Artist details could not be loaded."

    def test_upstream_failure(self, client: TestClient, mock_api: AsyncMock) -> None:
        """Test that an upstream failure returns 502."""
        mock_api.list_performers.side_effect = FetchError("Failed to fetch artists.")

        response = client.get("/api/v1/artists")

        assert response.status_code == 502
        assert response.json()["error"] == "fetch_error"
