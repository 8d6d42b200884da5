"""Centralized message constants for error messages and log templates."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Argument validation
    CHANNEL_REQUIRED = "Channel must be a non-empty string"
    NOW_PLAYING_REQUIRED = "You must provide the now playing message reference"
    INVALID_PLAYER_OPTIONS = "Invalid player options ({errors} validation errors)"
    REPEAT_NOT_BOOL = 'Repeat can only be "true" or "false"'
    PAUSE_NOT_BOOL = 'Pause can only be "true" or "false"'
    VOLUME_NOT_NUMBER = "Volume must be a finite number"
    VOLUME_NEGATIVE = "Volume cannot be negative"
    POSITION_NOT_NUMBER = "Position must be a number"
    INTERVAL_NOT_NUMBER = "Dynamic repeat interval must be a finite number"
    INTERVAL_NOT_POSITIVE = "Dynamic repeat interval must be at least 1 ms"

    # Prerequisites
    NO_VOICE_CHANNEL = "No voice channel has been set"
    NO_AVAILABLE_NODES = "No available nodes"
    UNKNOWN_NODE = "Node '{identifier}' is not registered"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."

    # Ranges
    QUEUE_TOO_SMALL = "The queue size must be greater than 1"
    SKIP_EXCEEDS_QUEUE = "Cannot skip more than the queue length"

    # State
    NO_CURRENT_TRACK = "No current track"
    NO_PREVIOUS_TRACK = "No previous track to go back to"
    PLAYER_DESTROYED = "Player has been destroyed"

    # Queue
    INVALID_QUEUE_INDEX = "Queue index {index} is out of range"
    INVALID_QUEUE_OFFSET = "Queue offset must be between 0 and {size}"

    # Node
    NODE_HTTP_ERROR = "Node responded with HTTP {status} for {method} {path}"
    NODE_TRANSPORT_ERROR = "Could not reach node: {error}"
    NODE_LOAD_FAILED = "Node failed to load tracks: {message}"

    # Settings
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters.
    """

    # Player lifecycle
    PLAYER_CREATED = "Created player for room %s on node %s"
    PLAYER_REUSED = "Returning existing player for room %s"
    PLAYER_DESTROYED = "Destroyed player for room %s"
    PLAYER_ALREADY_DESTROYED = "Player for room %s is already destroyed"
    PLAYER_REMOVED = "Removed player for room %s from registry"
    PLAYER_STATE_CHANGED = "Player %s: %s -> %s"

    # Voice
    VOICE_JOIN_SENT = "Sent voice join for room %s (channel %s)"
    VOICE_LEAVE_SENT = "Sent voice leave for room %s"
    VOICE_GUILD_NOT_FOUND = "Guild %s not found, cannot send voice state"
    VOICE_STATE_FAILED = "Failed to send voice state for room %s: %r"

    # Playback
    PLAYBACK_STARTED = "Started playing '%s' in room %s"
    PLAYBACK_REJECTED = "Node rejected playback of '%s' in room %s"
    PLAYBACK_STOPPED = "Stopped playback in room %s (skipped %d)"
    PLAYBACK_PAUSED = "Set paused=%s in room %s"
    PLAYBACK_SEEK = "Seeked to %d ms in room %s"
    PLAYBACK_RESTART = "Restarting current track in room %s"
    TRACK_RESOLVING = "Resolving unresolved track '%s' in room %s"
    TRACK_RESOLVED = "Resolved '%s' to %s"
    TRACK_RESOLVE_FAILED = "Failed to resolve '%s' in room %s: %s"
    TRACK_FALLBACK = "Falling back to next queued track in room %s"

    # Repeat
    REPEAT_MODE_CHANGED = "Repeat mode for room %s: %s -> %s"
    DYNAMIC_REPEAT_ARMED = "Dynamic repeat armed for room %s every %d ms"
    DYNAMIC_REPEAT_DISARMED = "Dynamic repeat disarmed for room %s"
    DYNAMIC_REPEAT_SHUFFLED = "Dynamic repeat shuffled %d tracks in room %s"
    DYNAMIC_REPEAT_STALE = "Ignoring stale dynamic repeat tick for room %s"
    DYNAMIC_REPEAT_TICK_FAILED = "Dynamic repeat tick failed for room %s"

    # Remote calls
    REMOTE_CALL_FAILED = "Remote call '%s' failed for room %s"
    REMOTE_CALL_REJECTED = "Remote call '%s' was rejected for room %s"

    # Node
    NODE_REGISTERED = "Registered node %s"
    NODE_REQUEST = "%s %s"
    NODE_HTTP_ERROR = "Node %s responded with HTTP %d for %s %s"
    NODE_TRANSPORT_ERROR = "Node %s unreachable for %s %s: %r"
    NODE_CLIENT_CLOSED = "Closed HTTP client for node %s"

    # Events
    EVENT_SUBSCRIBED = "Handler subscribed to %s"
    EVENT_UNSUBSCRIBED = "Handler unsubscribed from %s"
    EVENT_HANDLERS_CLEARED = "All event handlers cleared"
    EVENT_NO_HANDLERS = "No handlers for %s"
    EVENT_DISPATCH = "Dispatching %s to %d handlers"
    EVENT_HANDLER_ERROR = "Error in handler for %s"

    # Container
    CONTAINER_CREATED = "Container created (environment=%s)"
    CONTAINER_SHUTDOWN = "Container shut down"
