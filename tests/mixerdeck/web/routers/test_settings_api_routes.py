"""Tests for settings API routes."""


class TestSettingsEndpoints:
    """Test reading and updating settings."""

    def test_get_settings_defaults(self, client):
        """Should return default settings before any update."""
        response = client.get("/api/settings")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["settings"] == {"whitelistedApps": []}

    def test_patch_settings(self, client):
        """Should merge and persist updates."""
        client.patch("/api/settings", json={"theme": "dark"})

        response = client.patch("/api/settings", json={"whitelistedApps": ["C:\\chrome.exe"]})

        assert response.status_code == 200
        assert response.json()["settings"] == {
            "whitelistedApps": ["C:\\chrome.exe"],
            "theme": "dark",
        }
        assert client.get("/api/settings").json()["settings"]["theme"] == "dark"

    def test_patch_invalid_settings(self, client):
        """Should reject a value of the wrong type."""
        response = client.patch("/api/settings", json={"whitelistedApps": "not-a-list"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_patch_requires_object(self, client):
        """Should reject a body that is not an object."""
        response = client.patch("/api/settings", json=["a", "b"])

        assert response.status_code == 400
