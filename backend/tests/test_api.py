"""
Integration tests for the API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.models.content import ContentItem, ImageSize, ImageVariant
from app.services.thumbnail_endpoint import ThumbnailEndpoint


def make_client(host, enabled=True):
    endpoint = ThumbnailEndpoint(host, "post_thumbnail", "post_thumbnail", "size")
    return TestClient(create_app(endpoint=endpoint, endpoint_enabled=enabled))


@pytest.fixture
def client(host):
    """Create a test client with pretty permalinks."""
    with make_client(host) as client:
        yield client


@pytest.fixture
def plain_client(plain_host):
    """Create a test client with plain permalinks."""
    with make_client(plain_host) as client:
        yield client


class TestHealthEndpoint:
    """Tests for health check endpoint."""
    
    def test_health_check(self, client):
        """Test that health endpoint returns healthy status."""
        response = client.get("/health")
        
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data


class TestRootEndpoint:
    """Tests for root endpoint."""
    
    def test_root_returns_info(self, client):
        """Test that root returns API info."""
        response = client.get("/")
        
        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert "version" in data
        assert "docs" in data


class TestPrettyThumbnailRedirect:
    """Tests for /post_thumbnail/{post_id}[/{size}]."""
    
    def test_redirect_with_size(self, client):
        """Test redirect to a registered size variant."""
        response = client.get("/post_thumbnail/7/medium", follow_redirects=False)
        
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/img-medium.jpg"
    
    def test_redirect_without_size(self, client):
        """Test redirect to the original image."""
        response = client.get("/post_thumbnail/7", follow_redirects=False)
        
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/img.jpg"
    
    def test_unregistered_size_falls_back(self, client):
        """Test that an unknown size name is ignored."""
        response = client.get("/post_thumbnail/7/gigantic", follow_redirects=False)
        
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/img.jpg"
    
    def test_attachment_is_own_thumbnail(self, client):
        """Test that an image attachment redirects to itself."""
        response = client.get("/post_thumbnail/42", follow_redirects=False)
        
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/2024/02/photo.png"
    
    def test_nonexistent_post(self, client):
        """Test 404 for a post that doesn't exist."""
        response = client.get("/post_thumbnail/999999", follow_redirects=False)
        
        assert response.status_code == 404
        assert "location" not in response.headers
        assert response.json()["detail"]["code"] == "THUMBNAIL_NOT_FOUND"
    
    def test_post_without_thumbnail(self, client):
        """Test 404 for a post without a featured image."""
        response = client.get("/post_thumbnail/50", follow_redirects=False)
        
        assert response.status_code == 404
    
    def test_query_string_overrides_path(self, client):
        """Test that explicit query variables win over rewritten ones."""
        response = client.get("/post_thumbnail/7?size=medium", follow_redirects=False)
        
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/img-medium.jpg"
    
    def test_non_numeric_path_not_matched(self, client):
        """Test that non-matching paths fall through to normal routing."""
        response = client.get("/post_thumbnail/abc", follow_redirects=False)
        
        assert response.status_code == 404
        assert response.json()["detail"] == "Not Found"
    
    def test_post_method_not_handled(self, client):
        """Test that only GET requests are rewritten."""
        response = client.post("/post_thumbnail/7")
        
        assert response.status_code in (404, 405)
        assert "location" not in response.headers


class TestQueryThumbnailRedirect:
    """Tests for /index.php?post_thumbnail={post_id}&size={size}."""
    
    def test_redirect(self, client):
        response = client.get(
            "/index.php",
            params={"post_thumbnail": "7", "size": "medium"},
            follow_redirects=False,
        )
        
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/img-medium.jpg"
    
    def test_without_post_id(self, client):
        """Test that requests without a post ID get the front page."""
        response = client.get("/index.php", follow_redirects=False)
        
        assert response.status_code == 200
        assert "message" in response.json()
    
    def test_empty_post_id(self, client):
        response = client.get("/index.php?post_thumbnail=", follow_redirects=False)
        
        assert response.status_code == 200
    
    def test_malformed_post_id(self, client):
        response = client.get("/index.php?post_thumbnail=abc", follow_redirects=False)
        
        assert response.status_code == 404
    
    def test_plain_permalinks(self, plain_client):
        """Test query URLs with plain permalinks."""
        response = plain_client.get("/index.php?post_thumbnail=42", follow_redirects=False)
        
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/2024/02/photo.png"
    
    def test_plain_permalinks_ignore_pretty_paths(self, plain_client):
        response = plain_client.get("/post_thumbnail/7", follow_redirects=False)
        
        assert response.status_code == 404
        assert "location" not in response.headers


class TestDisabledEndpoint:
    """Tests for an application with the endpoint disabled."""
    
    def test_rule_removed(self, make_host):
        host = make_host()
        with make_client(host):
            pass
        assert host.current_rules()
        
        restarted = make_host()
        with make_client(restarted, enabled=False) as client:
            assert restarted.current_rules() == {}
            
            response = client.get("/post_thumbnail/7", follow_redirects=False)
            assert response.status_code == 404
    
    def test_disable_after_enable_on_same_host(self, host):
        """Test that disabling unregisters query variables added earlier."""
        with make_client(host) as client:
            response = client.get("/index.php?post_thumbnail=7", follow_redirects=False)
            assert response.status_code == 302
        
        with make_client(host, enabled=False) as client:
            response = client.get("/index.php?post_thumbnail=7", follow_redirects=False)
        
        assert response.status_code == 200
        assert "location" not in response.headers
        assert "post_thumbnail" not in host.public_query_vars
        assert "size" not in host.public_query_vars
    
    def test_query_variable_ignored(self, make_host):
        with make_client(make_host(), enabled=False) as client:
            response = client.get("/index.php?post_thumbnail=7", follow_redirects=False)
        
        assert response.status_code == 200
        assert "location" not in response.headers


class TestEndpointApi:
    """Tests for the thumbnail endpoint structure API."""
    
    def test_structure_pretty(self, client):
        response = client.get("/api/v1/thumbnail-endpoint")
        
        assert response.status_code == 200
        data = response.json()
        assert data["structure"] == "/post_thumbnail/%post_id%/%size%"
        assert data["url_template"] == "https://example.com/post_thumbnail/%post_id%/%size%"
        assert data["pretty_permalinks"] is True
        assert {s["name"] for s in data["sizes"]} == {"thumbnail", "medium", "medium_large", "large"}
    
    def test_structure_plain(self, plain_client):
        response = plain_client.get("/api/v1/thumbnail-endpoint")
        
        assert response.status_code == 200
        data = response.json()
        assert data["structure"] == "/index.php?post_thumbnail=%post_id%&size=%size%"
        assert data["pretty_permalinks"] is False
    
    def test_build_url(self, client):
        response = client.get("/api/v1/thumbnail-endpoint/url?post_id=7&size=medium")
        
        assert response.status_code == 200
        assert response.json()["url"] == "https://example.com/post_thumbnail/7/medium"
    
    def test_built_url_redirects(self, client):
        """Test that a URL built by the API is served by the endpoint."""
        url = client.get("/api/v1/thumbnail-endpoint/url?post_id=7&size=medium").json()["url"]
        
        response = client.get(url.replace("https://example.com", ""), follow_redirects=False)
        
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/img-medium.jpg"
    
    def test_build_url_invalid_post_id(self, client):
        response = client.get("/api/v1/thumbnail-endpoint/url?post_id=-1")
        
        assert response.status_code == 422


class TestReservedCharacterSizes:
    """Tests for size names containing query string delimiters."""
    
    SIZE = "a&b=c"
    
    @pytest.fixture
    def odd_size_host(self, make_host):
        def _make(pretty_permalinks):
            host = make_host(pretty_permalinks=pretty_permalinks)
            host.add_image_size(ImageSize(name=self.SIZE, width=64, height=64))
            host.add_item(ContentItem(
                id=90,
                post_type="attachment",
                mime_type="image/jpeg",
                file="odd.jpg",
                sizes={self.SIZE: ImageVariant(file="odd-64x64.jpg", width=64, height=64)},
            ))
            return host
        return _make
    
    @pytest.mark.parametrize("pretty", [True, False])
    def test_built_url_redirects_to_variant(self, odd_size_host, pretty):
        host = odd_size_host(pretty)
        with make_client(host) as client:
            url = client.app.state.thumbnail_endpoint.build_url(90, self.SIZE)
            response = client.get(url.replace("https://example.com", ""), follow_redirects=False)
        
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/odd-64x64.jpg"
    
    def test_encoded_path(self, odd_size_host):
        with make_client(odd_size_host(True)) as client:
            response = client.get("/post_thumbnail/90/a%26b%3Dc", follow_redirects=False)
        
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/odd-64x64.jpg"
