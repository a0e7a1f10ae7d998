"""
Multi-factor authentication without a terminal
"""
import asyncio
from robinpy import RobinhoodClient, MfaResolver


def code_from_env():
    import os
    return os.environ["ROBINHOOD_MFA_CODE"]


class QueueResolver(MfaResolver):
    """Waits for the code to arrive from elsewhere in the application."""

    def __init__(self, queue: asyncio.Queue):
        self.queue = queue

    async def resolve(self) -> str:
        return await self.queue.get()


async def main():
    # Plain callable (sync or async)
    client = RobinhoodClient("robinhood")
    await client.start(username="me@example.com", password="password", mfa=code_from_env)
    await client.close()

    # Custom resolver
    queue = asyncio.Queue()
    queue.put_nowait("123456")
    client = RobinhoodClient("robinhood")
    await client.start(username="me@example.com", password="password", mfa=QueueResolver(queue))
    await client.close()


if __name__ == "__main__":
    asyncio.run(main())
