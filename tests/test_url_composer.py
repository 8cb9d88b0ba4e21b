from urllib.parse import urlsplit

import pytest

from core.config import ImageDeliveryConfig
from domain.enums.image_options import AbsoluteUrlPolicy, ProviderConvention
from domain.schemas.transformation import TransformationRequest
from services.url_composer import UrlComposer

WEBP_400 = TransformationRequest(width=400, quality=80, format="webp")


@pytest.mark.parametrize("reference", ["", None])
def test_empty_reference_composes_to_empty_string(query_composer, path_composer, reference):
    assert query_composer.compose(reference, WEBP_400) == ""
    assert path_composer.compose(reference, WEBP_400) == ""


def test_path_segment_url(path_composer):
    assert path_composer.compose("products/abc.jpg", WEBP_400) == \
        "https://cdn.example.com/w-400,q-80,f-webp/products/abc.jpg"


def test_query_string_url(query_composer):
    assert query_composer.compose("products/abc.jpg", WEBP_400) == \
        "https://cdn.example.com/products/abc.jpg?width=400&quality=80&format=webp"


def test_no_transformation_gives_plain_url(query_composer, path_composer):
    assert query_composer.compose("/products/abc.jpg") == "https://cdn.example.com/products/abc.jpg"
    assert path_composer.compose("products//abc.jpg") == "https://cdn.example.com/products/abc.jpg"


def test_existing_query_is_extended(query_composer):
    assert query_composer.compose("products/abc.jpg?v=2", TransformationRequest(width=400)) == \
        "https://cdn.example.com/products/abc.jpg?v=2&width=400"


def test_cdn_origin_takes_precedence():
    composer = UrlComposer(ImageDeliveryConfig(base_url="https://pub-123.r2.dev/", cdn_url="https://images.vedhatrendz.com"))
    assert composer.compose("products/abc.jpg") == "https://images.vedhatrendz.com/products/abc.jpg"


def test_missing_origin_yields_relative_url():
    composer = UrlComposer(ImageDeliveryConfig())
    assert composer.compose("products/abc.jpg", TransformationRequest(width=400)) == "/products/abc.jpg?width=400"


@pytest.mark.parametrize("policy", [AbsoluteUrlPolicy.PASS_THROUGH, AbsoluteUrlPolicy.PROXY])
@pytest.mark.parametrize("convention", list(ProviderConvention))
def test_absolute_url_without_transformation_targets_same_resource(policy, convention):
    composer = UrlComposer(ImageDeliveryConfig(base_url="https://cdn.example.com", convention=convention, absolute_policy=policy))
    original = "https://pub-123.r2.dev/products/abc.jpg"
    composed = urlsplit(composer.compose(original))
    expected = urlsplit(original)
    assert (composed.netloc, composed.path) == (expected.netloc, expected.path)


def test_pass_through_ignores_transformation(query_composer):
    url = "https://pub-123.r2.dev/products/abc.jpg"
    assert query_composer.compose(url, WEBP_400) == url


def test_surrounding_whitespace_is_ignored(query_composer):
    url = "https://pub-123.r2.dev/products/abc.jpg"
    assert query_composer.compose(f"  {url}\n", WEBP_400) == url
    assert query_composer.compose("  products/abc.jpg ") == "https://cdn.example.com/products/abc.jpg"
    assert query_composer.compose("   ", WEBP_400) == ""


def test_proxy_policy_wraps_absolute_url():
    composer = UrlComposer(ImageDeliveryConfig(
        base_url="https://cdn.example.com",
        absolute_policy=AbsoluteUrlPolicy.PROXY,
    ))
    assert composer.compose("https://images.example.com/a.jpg", TransformationRequest(width=400, quality=80)) == \
        "/cdn-cgi/image/width=400&quality=80/https://images.example.com/a.jpg"


def test_strip_host_rehosts_on_origin():
    composer = UrlComposer(ImageDeliveryConfig(
        base_url="https://cdn.example.com",
        absolute_policy=AbsoluteUrlPolicy.STRIP_HOST,
    ))
    assert composer.compose("https://old.example.com//products//abc.jpg", TransformationRequest(width=400)) == \
        "https://cdn.example.com/products/abc.jpg?width=400"


def test_wrap_with_proxy_without_params_keeps_url(query_composer):
    assert query_composer.wrap_with_proxy("https://a.com/x.jpg", "") == "https://a.com/x.jpg"
    assert query_composer.wrap_with_proxy("", "width=10") == ""


def test_default_quality_is_applied_when_omitted():
    composer = UrlComposer(ImageDeliveryConfig(
        base_url="https://ik.imagekit.io/vedha",
        convention=ProviderConvention.PATH_SEGMENT,
        default_quality=80,
    ))
    assert composer.compose("products/abc.jpg", TransformationRequest(width=300)) == \
        "https://ik.imagekit.io/vedha/w-300,q-80/products/abc.jpg"
    assert composer.compose("products/abc.jpg", TransformationRequest(width=300, quality=60)) == \
        "https://ik.imagekit.io/vedha/w-300,q-60/products/abc.jpg"
    assert composer.compose("products/abc.jpg") == "https://ik.imagekit.io/vedha/products/abc.jpg"
