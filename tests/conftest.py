import random
from unittest.mock import AsyncMock, MagicMock

import pytest

# ============================================================================
# Port Fixtures
# ============================================================================


@pytest.fixture
def mock_node():
    """Remote node whose calls all succeed."""
    node = MagicMock()
    node.identifier = "main"
    node.update_player = AsyncMock(return_value=True)
    node.destroy_player = AsyncMock(return_value=True)
    return node


@pytest.fixture
def mock_voice_signaler():
    """Voice signaler that records the frames it is given."""
    signaler = MagicMock()
    signaler.send_voice_state = MagicMock()
    return signaler


@pytest.fixture
def mock_track_resolver():
    """Track resolver with a mocked ``resolve`` and the real validation rules."""
    from node_player.application.interfaces.track_resolver import TrackResolver

    class StubResolver(TrackResolver):
        async def resolve(self, track):
            raise NotImplementedError

    resolver = StubResolver()
    resolver.resolve = AsyncMock()
    return resolver


@pytest.fixture
def event_bus():
    from node_player.domain.shared.events import EventBus

    return EventBus()


@pytest.fixture
def recorded_events(event_bus):
    """List that receives every event emitted on ``event_bus``."""
    from node_player.domain.shared.events import DomainEvent

    events = []
    event_bus.subscribe(DomainEvent, events.append)
    return events


# ============================================================================
# Player Fixtures
# ============================================================================


@pytest.fixture
def registry(mock_node, mock_voice_signaler, mock_track_resolver, event_bus):
    from node_player.application.services.player_registry import PlayerRegistry

    return PlayerRegistry(
        voice_signaler=mock_voice_signaler,
        track_resolver=mock_track_resolver,
        event_bus=event_bus,
        nodes={"main": mock_node},
        rng=random.Random(7),
    )


@pytest.fixture
def make_player(mock_node, mock_voice_signaler, mock_track_resolver, event_bus):
    """Factory for players built directly, without the registry's initial volume call."""
    from node_player.application.services.player import Player
    from node_player.domain.player.value_objects import PlayerOptions

    def _make(room_id="G1", voice_channel_id=None, **options):
        return Player(
            options=PlayerOptions(room_id=room_id, voice_channel_id=voice_channel_id, **options),
            node=mock_node,
            voice_signaler=mock_voice_signaler,
            track_resolver=mock_track_resolver,
            event_bus=event_bus,
            rng=random.Random(7),
        )

    return _make


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def make_track():
    """Factory for playable tracks with predictable identifiers."""
    from node_player.domain.player.entities import Track

    def _make(identifier="track-1", duration=180_000, **fields):
        fields.setdefault("title", f"Title {identifier}")
        fields.setdefault("author", "Test Artist")
        return Track(encoded=f"enc-{identifier}", identifier=identifier, duration=duration, **fields)

    return _make


@pytest.fixture
def sample_track(make_track):
    return make_track("track-1", duration=200_000)


@pytest.fixture
def sample_tracks(make_track):
    return [make_track(f"track-{i}") for i in range(1, 6)]


@pytest.fixture
def unresolved_track():
    from node_player.domain.player.entities import UnresolvedTrack

    return UnresolvedTrack(title="Song", author="Band", duration=200_000)
