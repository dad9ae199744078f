"""Example usage of the graph_batch module.

Runs several Graph API calls in one round trip. Set GRAPH_ACCESS_TOKEN (and
optionally GRAPH_APP_SECRET, GRAPH_API_VERSION) before running.
"""

import asyncio
import logging
import os

from graph_batch import GraphAPI, GraphCollection, GraphConfig, is_error

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)


async def main():
    config = GraphConfig.from_env()
    async with GraphAPI(
        access_token=os.environ["GRAPH_ACCESS_TOKEN"],
        app_secret=os.environ.get("GRAPH_APP_SECRET"),
        config=config,
    ) as api:
        batch = api.batch()
        await batch.get_object("me", {"fields": "id,name"})
        await batch.get_connections("me", "friends", {"limit": 5})
        await batch.get_picture_data("me")
        # Only the status code is wanted here
        await batch.get_object("me/permissions", options={"http_component": "status"})

        me, friends, picture, permissions_status = await batch.execute()

        for label, result in [
            ("me", me),
            ("friends", friends),
            ("picture", picture),
            ("permissions status", permissions_status),
        ]:
            if is_error(result):
                print(f"✗ {label}: {result}")
            else:
                print(f"✓ {label}: {result}")

        if isinstance(friends, GraphCollection) and friends.paging.get("next"):
            more = await friends.next_page()
            print(f"ℹ️  next page of friends: {more}")


if __name__ == "__main__":
    asyncio.run(main())
