"""Search adapter layer — Pluggable connectors for magnet search sources.

Built-in adapters:
  - apibay: The Pirate Bay via the apibay.org JSON API
  - nyaa: nyaa.si via nyaaapi.onrender.com (remotely paged)
  - sukebei: sukebei.nyaa.si via nyaaapi.onrender.com (remotely paged)
  - sample: Bundled local dataset (no network; the default fallback)

Implement ``SearchAdapter`` (or ``RemoteSearchAdapter`` for JSON APIs) to
connect your own source.
"""
