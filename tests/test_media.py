import io

import httpx
import pytest
from PIL import Image

from utils.media import download_image, extension_for


def png_bytes(width=3, height=2):
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


def mock_client(status=200, headers=None, content=b""):
    def handler(request):
        return httpx.Response(status, headers=headers or {}, content=content)

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_extension_for():
    assert extension_for("image/jpeg") == ".jpeg"
    assert extension_for("image/webp; charset=binary") == ".webp"
    assert extension_for(None) == ".unknown"
    assert extension_for("garbage") == ".unknown"


def test_download_image_saves_with_extension_and_reads_size(tmp_path):
    client = mock_client(headers={"content-type": "image/png"}, content=png_bytes(3, 2))

    result = download_image("https://img.example.com/p/1", tmp_path / "place-1", client=client)

    assert result == {"path": str(tmp_path / "place-1.png"), "width": 3, "height": 2}
    assert (tmp_path / "place-1.png").read_bytes() == png_bytes(3, 2)


def test_download_image_without_content_type(tmp_path):
    client = mock_client(content=png_bytes(5, 4))
    result = download_image("https://img.example.com/p/2", tmp_path / "place-2", client=client)
    assert result["path"].endswith("place-2.unknown")
    assert (result["width"], result["height"]) == (5, 4)


def test_download_image_http_error_propagates(tmp_path):
    client = mock_client(status=404, headers={"content-type": "text/html"}, content=b"nope")
    with pytest.raises(httpx.HTTPStatusError):
        download_image("https://img.example.com/missing", tmp_path / "x", client=client)
    assert list(tmp_path.iterdir()) == []
