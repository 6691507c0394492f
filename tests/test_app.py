"""
Tests for ReactorApp - loader to session wiring and teardown.
"""
import threading
from unittest.mock import MagicMock

import pytest

from reactor.app import ReactorApp
from reactor.api.catalog import NullCatalogClient
from reactor.errors import FetchError
from reactor.models import Catalog
from reactor.main import render, handle_command

from conftest import FakeAudioResource, make_track


class FailingClient:
    url = 'https://api.example.com/projects'

    def fetch(self):
        raise FetchError('Catalog request failed: connection refused')

    def close(self):
        pass


def start_and_wait(app):
    settled = threading.Event()
    app.on_change = settled.set
    app.start()
    assert settled.wait(5)


@pytest.fixture
def resources():
    return []


@pytest.fixture
def app(resources):
    def factory():
        resource = FakeAudioResource()
        resources.append(resource)
        return resource
    a = ReactorApp(NullCatalogClient(), factory)
    yield a
    a.stop()


class TestLifecycle:
    """Tests for catalog loading into a session."""

    def test_ready_creates_session(self, app, resources):
        start_and_wait(app)
        snapshot = app.snapshot()
        assert snapshot.loader_status == 'ready'
        assert snapshot.session.active_index == 0
        assert snapshot.session.play_state == 'paused'
        assert len(resources) == 1

    def test_error_has_no_session(self):
        app = ReactorApp(FailingClient(), FakeAudioResource)
        start_and_wait(app)
        snapshot = app.snapshot()
        assert snapshot.loader_status == 'error'
        assert 'connection refused' in snapshot.loader_error
        assert snapshot.session is None

    def test_new_catalog_replaces_session(self, app, resources):
        """Installing a new catalog closes the old session and its resource."""
        start_and_wait(app)
        old = app.session
        new = app.install(Catalog([make_track(9)]))

        assert old.closed
        assert resources[0].released
        assert new is app.session
        assert new.resource is resources[1]
        assert new.active_index == 0

    def test_volume_carries_over(self, app, resources):
        start_and_wait(app)
        app.session.set_volume(0.2)
        app.install(Catalog([make_track(9)]))
        assert resources[1].volume == 0.2

    def test_stop_releases(self, app, resources):
        start_and_wait(app)
        app.stop()
        assert app.session is None
        assert resources[0].released

    def test_superseded_load_ignored(self, app):
        start_and_wait(app)
        stale = app.loader
        app.loader = MagicMock()
        session = app.session
        app._on_loaded(stale)
        assert app.session is session


class TestConsole:
    """Tests for the text front end."""

    def test_render_loading(self, app):
        assert render(app.snapshot()) == 'Loading catalog...'

    def test_render_marks_active(self, app):
        start_and_wait(app)
        text = render(app.snapshot())
        assert '>   0  Neon Drift - kai' in text
        assert 'Now: Neon Drift' in text

    def test_render_marks_active_filtered_row(self, app):
        """The marker follows the active track's row in the filtered view."""
        start_and_wait(app)
        app.session.set_filter('dog')
        assert '>' not in render(app.snapshot()).splitlines()[1]

        app.session.select_filtered(0)
        text = render(app.snapshot())
        assert '>   0  Dog Song - rex' in text
        assert 'Filter: "dog" (1/3)' in text

    def test_commands_drive_session(self, app, resources):
        start_and_wait(app)
        assert handle_command(app, 'p')
        assert app.session.active_index == 2
        handle_command(app, 'v 3')
        assert app.session.volume.level == 1.0
        handle_command(app, '/dog')
        assert len(app.session.filtered_view) == 1
        handle_command(app, '0')
        assert app.session.active_index == 2
        handle_command(app, 't')
        assert app.session.is_pending

    def test_quit(self, app):
        assert handle_command(app, 'q') is False

    def test_render_error(self):
        app = ReactorApp(FailingClient(), FakeAudioResource)
        start_and_wait(app)
        assert render(app.snapshot()).startswith('Catalog unavailable')
