#!/usr/bin/env python3
"""Manual script to test an AniList preview search."""

from anime_vault.catalog.client import AniListClient

if __name__ == "__main__":
    with AniListClient() as client:
        for preview in client.search_previews("Frieren", per_page=5):
            print(preview, preview.score_display, preview.cover_image)
