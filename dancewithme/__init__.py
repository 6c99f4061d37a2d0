"""Dance With Me: events, swipe and per-event chat."""
