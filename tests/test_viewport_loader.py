import pytest

from domain.enums.image_options import LoadingStrategy
from services.viewport_loader import (
    IntersectionEntry,
    LoaderState,
    Rect,
    ViewportGatedLoader,
    ViewportObserver,
    intersection_ratio,
)

VIEWPORT = Rect(0, 0, 1000, 800)
FAR_BELOW = Rect(0, 2000, 300, 300)


@pytest.fixture
def loader():
    return ViewportGatedLoader(
        placeholder_url="https://cdn.example.com/a.jpg?width=50",
        full_url="https://cdn.example.com/a.jpg?width=800",
        src_set="https://cdn.example.com/a.jpg?width=400 400w",
        root_margin=50,
        threshold=0.1,
    )


def test_intersection_ratio():
    assert intersection_ratio(Rect(0, 0, 100, 100), VIEWPORT) == 1.0
    assert intersection_ratio(Rect(0, 750, 100, 100), VIEWPORT) == 0.5
    assert intersection_ratio(FAR_BELOW, VIEWPORT) == 0.0
    # El margen amplía el viewport
    assert intersection_ratio(Rect(0, 810, 100, 100), VIEWPORT, root_margin=50) == 0.4


def test_only_placeholder_before_intersection(loader):
    with loader.mount(FAR_BELOW):
        assert loader.check(VIEWPORT) == LoaderState.PENDING
        rendered = loader.render()
        assert rendered.placeholder_visible
        assert rendered.full_url is None
        assert rendered.src_set == ""


def test_full_lifecycle(loader):
    with loader.mount(FAR_BELOW):
        observer = loader.observer
        loader.move(Rect(0, 700, 300, 300))
        assert loader.check(VIEWPORT) == LoaderState.IN_VIEW

        # Un solo disparo: el observador queda desconectado
        assert not observer.connected
        assert loader.observer is None

        rendered = loader.render()
        assert rendered.full_url == "https://cdn.example.com/a.jpg?width=800"
        assert rendered.placeholder_visible

        loader.on_load()
        rendered = loader.render()
        assert rendered.state == LoaderState.LOADED
        assert not rendered.placeholder_visible
        assert rendered.full_url == "https://cdn.example.com/a.jpg?width=800"


def test_root_margin_triggers_before_visible(loader):
    # 10px por debajo del borde pero dentro del margen de 50px: 40/300
    with loader.mount(Rect(0, 810, 300, 300)):
        assert loader.check(VIEWPORT) == LoaderState.IN_VIEW


def test_below_threshold_does_not_trigger(loader):
    # Solo 50px de 1000 dentro del viewport ampliado (5%)
    with loader.mount(Rect(0, 800, 300, 1000)):
        assert loader.check(VIEWPORT) == LoaderState.PENDING


def test_callback_fires_once():
    calls = []
    observer = ViewportObserver(lambda entry: (calls.append(entry), observer.disconnect()), root_margin=0)
    observer.observe("a", Rect(0, 0, 10, 10))
    observer.check(VIEWPORT)
    observer.check(VIEWPORT)
    assert len(calls) == 1
    assert calls[0].is_intersecting


def test_unmount_disconnects_observer(loader):
    with loader.mount(FAR_BELOW):
        observer = loader.observer
        assert observer.connected
    assert not observer.connected
    assert loader.observer is None
    assert loader.state == LoaderState.PENDING


def test_error_inside_mount_still_disconnects(loader):
    with pytest.raises(RuntimeError):
        with loader.mount(FAR_BELOW):
            observer = loader.observer
            raise RuntimeError("render failed")
    assert not observer.connected


def test_eager_strategy_starts_in_view():
    loader = ViewportGatedLoader("ph", "full", strategy=LoadingStrategy.EAGER)
    with loader.mount(FAR_BELOW):
        assert loader.state == LoaderState.IN_VIEW
        assert loader.observer is None


def test_load_error_reveals_fallback(loader):
    with loader.mount(Rect(0, 0, 100, 100)):
        loader.check(VIEWPORT)
        loader.on_error()
        rendered = loader.render()
        assert rendered.state == LoaderState.FAILED
        assert rendered.fallback_url == "/placeholder.svg"
        assert not rendered.placeholder_visible
        assert rendered.full_url is None

        # FAILED es terminal
        loader.on_load()
        assert loader.state == LoaderState.FAILED


def test_events_out_of_order_are_ignored(loader):
    loader.on_load()
    loader.on_error()
    assert loader.state == LoaderState.PENDING

    loader.on_intersection(IntersectionEntry(target_id=loader.target_id, ratio=0.0, is_intersecting=False))
    assert loader.state == LoaderState.PENDING

    loader.on_intersection(IntersectionEntry(target_id=loader.target_id, ratio=1.0, is_intersecting=True))
    loader.on_load()
    loader.on_intersection(IntersectionEntry(target_id=loader.target_id, ratio=1.0, is_intersecting=True))
    assert loader.state == LoaderState.LOADED


def test_each_loader_owns_its_observer():
    first = ViewportGatedLoader("ph1", "full1", root_margin=0)
    second = ViewportGatedLoader("ph2", "full2", root_margin=0)
    with first.mount(Rect(0, 0, 100, 100)), second.mount(FAR_BELOW):
        first.check(VIEWPORT)
        second.check(VIEWPORT)
        assert first.state == LoaderState.IN_VIEW
        assert second.state == LoaderState.PENDING
        assert second.observer.connected
