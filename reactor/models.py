"""
Reactor Data Models - Core data structures.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Iterator, Literal, Sequence

PlayStatus = Literal['idle', 'paused', 'playing', 'errored']
LoaderStatus = Literal['loading', 'ready', 'error']
AudioEventKind = Literal['error', 'ended']


@dataclass(frozen=True)
class Track:
    """One playable project from the catalog."""
    id: str
    title: str
    creator_name: str
    audio_url: str
    cover_image_url: Optional[str] = None
    background_image_url: Optional[str] = None
    like_count: int = 0
    rating: float = 0.0

    def matches(self, text: str) -> bool:
        """Case-insensitive match against title and creator name."""
        needle = text.lower()
        return needle in self.title.lower() or needle in self.creator_name.lower()


class Catalog:
    """Ordered, immutable list of playable tracks for one session."""

    def __init__(self, tracks: Sequence[Track] = (), rejected: int = 0):
        self._tracks: Tuple[Track, ...] = tuple(tracks)
        self.rejected = rejected  # Malformed records dropped while decoding

    def __len__(self) -> int:
        return len(self._tracks)

    def __getitem__(self, index: int) -> Track:
        return self._tracks[index]

    def __iter__(self) -> Iterator[Track]:
        return iter(self._tracks)

    def __bool__(self) -> bool:
        return bool(self._tracks)

    def __repr__(self) -> str:
        return f'Catalog({len(self._tracks)} tracks, rejected={self.rejected})'

    @property
    def tracks(self) -> Tuple[Track, ...]:
        return self._tracks


@dataclass(frozen=True)
class FilteredView:
    """
    Read-only subsequence of a catalog matching a filter.

    Rows are positions in the view; `indices[row]` is the absolute
    catalog index of that row. Never index the catalog with a row.
    """
    text: str = ''
    tracks: Tuple[Track, ...] = ()
    indices: Tuple[int, ...] = ()

    def __len__(self) -> int:
        return len(self.tracks)

    def to_absolute(self, row: int) -> Optional[int]:
        """Absolute catalog index for a view row, or None if out of range."""
        if 0 <= row < len(self.indices):
            return self.indices[row]
        return None

    def to_row(self, absolute_index: Optional[int]) -> Optional[int]:
        """View row showing an absolute index, or None if it is filtered out."""
        if absolute_index is None:
            return None
        try:
            return self.indices.index(absolute_index)
        except ValueError:
            return None


@dataclass(frozen=True)
class PlaybackTag:
    """Identity of one load on the audio resource."""
    track_id: str
    generation: int


@dataclass(frozen=True)
class AudioEvent:
    """Asynchronous notification from an audio resource."""
    kind: AudioEventKind
    tag: Optional[PlaybackTag]
    reason: Optional[str] = None


@dataclass(frozen=True)
class SessionSnapshot:
    """All session state a UI needs to render a frame."""
    catalog: Catalog
    filtered_view: FilteredView
    active_index: Optional[int]
    play_state: PlayStatus
    volume: float
    filter_text: str
    last_error: Optional[str] = None
    is_loading: bool = False  # Play requested, not yet acknowledged
    is_playing: bool = False  # What to show for play/pause button

    @property
    def active_track(self) -> Optional[Track]:
        if self.active_index is None:
            return None
        return self.catalog[self.active_index]

    @property
    def active_row(self) -> Optional[int]:
        """Row of the active track in the filtered view, if visible."""
        return self.filtered_view.to_row(self.active_index)


@dataclass
class AppSnapshot:
    """Loader lifecycle plus the current session, if any."""
    loader_status: LoaderStatus
    loader_error: Optional[str] = None
    session: Optional[SessionSnapshot] = None
