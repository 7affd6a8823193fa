"""Building blocks for small interactive sensor sketches.

Some core ideas

- An Arduino streams sensor frames over serial; `serial_io` reads them on the
  event loop and `frames` parses them incrementally.
- Control state is plain Python owned by one controller per sketch, smoothed
  with the composable signals from `logic` / `signals`.
- Timed behaviour goes through a `scheduler` (asyncio, or a manual clock in
  tests), so every pending timer has a handle that can be cancelled.
- Sound is mixed in numpy (`mixer`) and played with PyAudio (`audio`), speech
  goes through a `speech` engine (`tts` for pyttsx3).
- A browser page paints the scene computed in Python, streamed by `server`
  over a websocket; the page sends user commands back.
- Raw serial input can be recorded and replayed (`capture`).
"""
