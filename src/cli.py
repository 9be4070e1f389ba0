import asyncio
import argparse
import logging
from src.orchestration.service import main as service_main

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

async def _oneshot():
    from src.tiktok.profile_client import ProfileClient
    from src.config.settings import settings

    if not settings.username:
        print("No TikTok username configured")
        return
    client = ProfileClient(timeout=settings.http_timeout_sec)
    try:
        vid = await client.fetch_latest_video_id(settings.username)
    finally:
        await client.aclose()
    print(f"Creator {settings.username} latest video id: {vid}")


async def _status():
    import httpx
    from src.config.settings import settings
    base = f"http://127.0.0.1:{settings.api_port}"
    async with httpx.AsyncClient(timeout=5) as client:
        resp = await client.get(f"{base}/system/status")
        if resp.status_code != 200:
            print(f"Status unavailable: HTTP {resp.status_code}")
            return
        s = resp.json()
        print(f"Creator={s['creator']} Phase={s['phase']} Connected={s['connected']} Room={s['room_id']} LastVideo={s['last_video_id']}")


def main():
    parser = argparse.ArgumentParser(description="TikTok live and upload notifier for Discord")
    parser.add_argument("command", nargs="?", default="run", choices=["run", "check", "status"], help="run service, check latest upload once, or show status of a running service")
    args = parser.parse_args()

    if args.command == "check":
        asyncio.run(_oneshot())
    elif args.command == "status":
        asyncio.run(_status())
    else:
        # Start the long-running service (Discord relay + API server)
        asyncio.run(service_main())
if __name__ == "__main__":
    main()
