"""Terminal front end wiring and rendering."""
