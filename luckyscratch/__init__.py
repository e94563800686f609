"""Single-play-per-day scratch card prize draw."""
