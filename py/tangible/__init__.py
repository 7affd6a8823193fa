"""Tangible words: a text read aloud, paused and pointed at by hand."""
