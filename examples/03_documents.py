"""
Download account documents (statements, tax forms, ...)
"""
import asyncio
import logging
from robinpy import RobinhoodClient, APIConfig, ThrottleConfig, setup_logging


async def main():
    logging.basicConfig(format="%(asctime)s %(name)s %(message)s")
    setup_logging(logging.INFO)

    async with RobinhoodClient("robinhood", username="me@example.com") as rh:
        documents = await rh.get_documents()
        print(f"{len(documents)} documents")

        # Throttled downloads may take a while
        paths = await rh.download_documents("documents")
        for path in paths:
            print(f"  {path}")


    # Give up on a document after 10 minutes of throttling
    config = APIConfig(throttle=ThrottleConfig(deadline=600))
    async with RobinhoodClient("robinhood", username="me@example.com", config=config) as rh:
        await rh.download_documents("documents")


if __name__ == "__main__":
    asyncio.run(main())
