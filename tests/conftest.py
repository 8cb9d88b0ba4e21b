import pytest

from core.config import ImageDeliveryConfig
from domain.enums.image_options import ProviderConvention
from services.url_composer import UrlComposer

CDN = "https://cdn.example.com"


class FakeR2Client:
    """Sustituto del cliente R2 que registra las llamadas"""

    def __init__(self, delete_result=True, fail=False):
        self.uploads = []
        self.deletes = []
        self.delete_result = delete_result
        self.fail = fail
        self.bucket = "vedhatrendz"

    def upload_file(self, file_content, object_key, content_type="image/jpeg", metadata=None):
        if self.fail:
            raise RuntimeError("R2 error: boom")
        self.uploads.append({
            "content": file_content,
            "object_key": object_key,
            "content_type": content_type,
            "metadata": metadata,
        })
        return f"https://pub-123.r2.dev/{object_key}"

    def delete_file(self, object_key):
        self.deletes.append(object_key)
        return self.delete_result

    def is_configured(self):
        return True


@pytest.fixture
def query_config():
    return ImageDeliveryConfig(base_url=CDN, convention=ProviderConvention.QUERY_STRING)


@pytest.fixture
def path_config():
    return ImageDeliveryConfig(base_url=CDN, convention=ProviderConvention.PATH_SEGMENT)


@pytest.fixture
def query_composer(query_config):
    return UrlComposer(query_config)


@pytest.fixture
def path_composer(path_config):
    return UrlComposer(path_config)


@pytest.fixture
def fake_r2():
    return FakeR2Client()
