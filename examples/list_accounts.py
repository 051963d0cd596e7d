import asyncio

from sf_fetch import FetcherEvent, SalesforceClient


async def list_accounts():
    # SF_INSTANCE_URL, SF_CLIENT_ID and SF_REFRESH_TOKEN must be set
    async with SalesforceClient.from_env() as client:
        client.subscribe(
            FetcherEvent.ACCESS_TOKEN_REFRESHED,
            lambda token: print("Access token refreshed"),
        )
        client.subscribe(
            FetcherEvent.TOKEN_EXPIRED,
            lambda response: print("Refresh token expired, please log in again"),
        )

        me = await client.fetch_user_info.get()
        print("Logged in as", me["preferred_username"])

        result = await client.fetch_query.query(
            "SELECT Id, Name FROM Account ORDER BY Name LIMIT 10"
        )
        for account in result["records"]:
            print(account["Id"], account["Name"], sep=" | ")
        print(result["totalSize"], "Total Accounts")


if __name__ == "__main__":
    asyncio.run(list_accounts())
