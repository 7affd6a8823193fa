"""Eccentric turntable: pot driven playback that remixes itself in shadow."""
