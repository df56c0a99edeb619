"""Curate tweets for a periodic newsletter."""
