"""
Tests for index arithmetic and filtered views.
"""
import pytest

from reactor.managers.navigation import clamp_index, wrap_index, build_filtered_view
from reactor.models import Catalog

from conftest import make_track


class TestIndexArithmetic:
    """Tests for clamping (selection) and wrapping (adjacency)."""

    @pytest.mark.parametrize('index, expected', [(-1, 0), (0, 0), (2, 2), (3, 2), (10, 2)])
    def test_clamp(self, index, expected):
        assert clamp_index(index, 3) == expected

    @pytest.mark.parametrize('index, expected', [(-1, 2), (0, 0), (3, 0), (4, 1)])
    def test_wrap(self, index, expected):
        assert wrap_index(index, 3) == expected

    def test_empty_list(self):
        assert clamp_index(0, 0) is None
        assert wrap_index(0, 0) is None


class TestFilteredView:
    """Tests for the mapping between view rows and catalog indices."""

    @pytest.fixture
    def catalog(self):
        return Catalog([
            make_track(0, 'Catalog A', 'ada'),
            make_track(1, 'Dog song', 'bob'),
            make_track(2, 'Night drive', 'Catherine'),
        ])

    def test_empty_filter_shows_everything(self, catalog):
        view = build_filtered_view(catalog, '')
        assert len(view) == 3
        assert view.indices == (0, 1, 2)

    def test_case_insensitive_title_and_creator(self, catalog):
        view = build_filtered_view(catalog, 'CAT')
        assert [t.title for t in view.tracks] == ['Catalog A', 'Night drive']
        assert view.indices == (0, 2)

    def test_row_to_absolute(self, catalog):
        view = build_filtered_view(catalog, 'cat')
        assert view.to_absolute(1) == 2
        assert view.to_absolute(2) is None
        assert view.to_absolute(-1) is None

    def test_absolute_to_row(self, catalog):
        view = build_filtered_view(catalog, 'cat')
        assert view.to_row(2) == 1
        assert view.to_row(1) is None
        assert view.to_row(None) is None

    def test_no_matches(self, catalog):
        view = build_filtered_view(catalog, 'zzz')
        assert len(view) == 0
        assert view.to_absolute(0) is None
