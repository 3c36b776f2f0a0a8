#!/usr/bin/env python3
"""
Smoke check of the track endpoints against a running server.
"""

import asyncio
import sys

import httpx

BASE_URL = "http://localhost:8000"  # Adjust if running on different port


async def check_list_tracks(client: httpx.AsyncClient) -> list:
    """GET /v1/tracks and GET /v1/tracks?published=true."""
    response = await client.get(f"{BASE_URL}/v1/tracks")
    response.raise_for_status()
    tracks = response.json()["items"]
    print(f"✅ GET /v1/tracks: {len(tracks)} tracks")

    response = await client.get(f"{BASE_URL}/v1/tracks", params={"published": "true"})
    response.raise_for_status()
    published = response.json()["items"]
    print(f"✅ GET /v1/tracks?published=true: {len(published)} tracks")
    return tracks


async def check_track_detail(client: httpx.AsyncClient, track_id: int) -> None:
    """GET /v1/tracks/{id} and report unresolved items."""
    response = await client.get(f"{BASE_URL}/v1/tracks/{track_id}")
    response.raise_for_status()
    track = response.json()
    print(f"✅ GET /v1/tracks/{track_id}: {track['title']}")
    for item in track["items"]:
        marker = "  " if item["details"] else "⚠️"
        title = item["details"]["title"] if item["details"] else "content unavailable"
        print(f"   {marker} {item['order']}. [{item['type']}] {title}")


async def main() -> None:
    """Run all endpoint checks."""
    print(f"Target: {BASE_URL}")
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{BASE_URL}/health")
            response.raise_for_status()
        except httpx.HTTPError:
            print("❌ Server is not running!")
            print("   Start with: uvicorn amc.server:app --reload --port 8000")
            sys.exit(1)

        try:
            tracks = await check_list_tracks(client)
            for track in tracks[:3]:
                await check_track_detail(client, track["id"])
        except httpx.HTTPError as e:
            print(f"❌ Track endpoint check failed: {e}")
            sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
