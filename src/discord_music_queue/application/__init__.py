"""Application layer - queue orchestration over the store and playback ports."""
