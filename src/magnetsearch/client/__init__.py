"""MagnetSearch Python SDK — Client library for the MagnetSearch API.

Provides both async and sync clients for interacting with a MagnetSearch server.

Quick start::

    from magnetsearch.client import MagnetSearchClient

    client = MagnetSearchClient("http://localhost:3001")

    outcome = client.search("ubuntu 24.04")
    for item in outcome["items"]:
        print(item["title"], item["size_label"], item["magnet_uri"])
"""

from magnetsearch.client.client import AsyncMagnetSearchClient, MagnetSearchClient

__all__ = ["AsyncMagnetSearchClient", "MagnetSearchClient"]
