"""
Session management - Login persistence
"""
import asyncio
from robinpy import RobinhoodClient


async def main():
    # Method 1: Session file (recommended)
    # First run: prompts for password (and MFA code if enabled)
    # Next runs: reuses robinhood.json until the token expires
    client = RobinhoodClient("robinhood", username="me@example.com")
    session = await client.start()
    print(f"Logged in as {session.username}, account {session.account}")
    await client.close()


    # Method 2: Context manager
    async with RobinhoodClient("robinhood", username="me@example.com") as rh:
        print(f"Authenticated: {rh.is_authenticated()}")


    # Method 3: Explicit steps
    client = RobinhoodClient("other_account")
    await client.authenticate("other@example.com", "password")
    await client.save()
    await client.close()


    # Logout: revokes the token and deletes the session file
    async with RobinhoodClient("robinhood", username="me@example.com") as rh:
        await rh.logout()
        print("Logged out!")


if __name__ == "__main__":
    asyncio.run(main())
