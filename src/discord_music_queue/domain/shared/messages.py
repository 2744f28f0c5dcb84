"""Centralized message constants for error messages and log templates."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Song / Codec Errors
    EMPTY_TRACK_SOURCE = "Track source cannot be empty"
    UNSUPPORTED_ADDABLE = "Cannot queue value of type {type_name}"
    MALFORMED_SONG_PAYLOAD = "Stored song payload is malformed: {error}"

    # Queue Validation Errors
    INVALID_POSITION = "Playback position cannot be negative"
    INVALID_VOLUME = "Volume must be between {minimum} and {maximum}"
    REPLAY_WITHOUT_CURRENT = "Replay mode requires a song to be loaded"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "datetime must be timezone-aware (UTC)"

    # Settings Validation Errors
    INVALID_REDIS_URL = "Redis URL must start with redis://, rediss://, or unix://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Store Lifecycle
    STORE_CONNECTED = "Queue store connected at %s"
    STORE_CLOSED = "Queue store closed"
    STORE_UNAVAILABLE = "Queue store unavailable during %s: %s"
    STORE_REFRESH_PARTIAL = "TTL refresh failed for %d of %d keys (first error: %s)"

    # Queue Operations
    QUEUE_ADDED = "Queued %d song(s) in guild %s"
    QUEUE_ADD_EMPTY = "Ignoring empty add batch for guild %s"
    QUEUE_ADVANCING = "Advancing queue in guild %s (skipped=%s)"
    QUEUE_REPLAYING = "Replaying current song in guild %s"
    QUEUE_REPLAY_BROKEN = "Skip cleared replay mode in guild %s"
    QUEUE_FINISHED = "Queue finished in guild %s"
    QUEUE_CLEARED = "Cleared %d key(s) for guild %s"
    QUEUE_CREATED = "Created queue handle for guild %s"
    QUEUE_DISCARDED = "Discarded queue handle for guild %s"

    # Playback
    PLAYBACK_STARTED = "Started '%s' in guild %s at %dms (replay=%s)"
    PLAYBACK_NO_PLAYER = "No player bound for guild %s; skipping %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s (system=%s)"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_FAILED_START = "Failed to start playback: %s"
    PLAYBACK_SEEKED = "Seeked to %dms in guild %s"
    VOLUME_CHANGED = "Volume changed %d -> %d in guild %s"

    # Session Binding
    SESSION_CREATED = "Created player session for guild %s"
    SESSION_EXISTS = "Player session already exists for guild %s"
    SESSION_DESTROYED = "Destroyed player session for guild %s"
    SESSION_ABSENT = "No player session to destroy for guild %s"
    TRACK_ENDED = "Track ended in guild %s (reason: %s)"
    TRACK_END_IGNORED = "Ignoring track end in guild %s (reason: %s)"
    TRACK_END_STALE = "Ignoring stale end of '%s' in guild %s; current song changed"
    TRACK_END_ERROR = "Playback error in guild %s: %s"
    TRACK_END_CALLBACK_ERROR = "Error in track end callback for guild %s"
    TRACK_END_NO_CALLBACK = "No track end callback registered for guild %s"

    # Channel Bindings
    TEXT_CHANNEL_BOUND = "Bound text channel %s for guild %s"
    TEXT_CHANNEL_UNBOUND = "Unbound text channel for guild %s"
    TEXT_CHANNEL_STALE = "Text channel %s no longer exists in guild %s; unbinding"

    # Voice
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"
    VOICE_CONNECTED = "Connected to voice channel %s in guild %s"
    VOICE_CONNECTION_TIMEOUT = "Voice connection timeout for channel %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_NOT_CONNECTED = "Not connected to voice in guild %s"

    # Events
    EVENT_SUBSCRIBED = "Subscribed handler to: %s"
    EVENT_UNSUBSCRIBED = "Unsubscribed handler from %s"
    EVENT_NO_HANDLERS = "No handlers for %s"
    EVENT_PUBLISHING = "Publishing %s to %d handlers"
    EVENT_HANDLER_ERROR = "Error in handler for %s: %s"

    # CLI
    CLI_STARTING = "Starting queue CLI (environment=%s)"
    CLI_FATAL_ERROR = "Fatal error: %s"
