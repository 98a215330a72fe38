"""Example: Send a signed Discourse post webhook to a local TopicSync."""

import asyncio
import json
import os

import httpx

from topicsync.api.verification import generate_signature


async def main():
    """Example of delivering a post webhook the way Discourse does."""
    url = "http://localhost:8000/wp-discourse/v1/update-topic-content"
    secret = os.environ.get("TOPICSYNC_WEBHOOK_SECRET", "change-me")

    body = json.dumps(
        {
            "post": {
                "topic_id": 42,
                "post_number": 5,
                "topic_title": "Hello from Discourse",
                "topic_posts_count": 5,
                "post_type": 1,
            }
        }
    ).encode()

    async with httpx.AsyncClient() as client:
        print("Sending webhook...")
        response = await client.post(
            url,
            content=body,
            headers={
                "Content-Type": "application/json",
                "X-Discourse-Event-Type": "post",
                "X-Discourse-Event": "post_created",
                "X-Discourse-Event-Signature": generate_signature(body, secret),
            },
        )

        print(f"Status: {response.status_code}")
        print(f"Body: {response.text}")


if __name__ == "__main__":
    asyncio.run(main())
