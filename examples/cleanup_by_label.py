"""Delete every sandbox carrying a given label.

Usage:
    python cleanup_by_label.py '{"team": "ml"}' [--force]
"""

import asyncio
import sys

from daytona_mcp import Toolbox


async def main(labels: str, force: bool) -> None:
    async with Toolbox.from_env() as toolbox:
        listed = await toolbox.sandboxes.list_sandboxes(labels=labels)
        if not listed.ok:
            print(listed.render())
            return

        sandboxes = listed.payload
        if isinstance(sandboxes, dict):
            sandboxes = sandboxes.get("items", [])
        print(f"Found {len(sandboxes)} sandbox(es)")

        results = await asyncio.gather(
            *(toolbox.sandboxes.delete_sandbox(s["id"], force) for s in sandboxes)
        )
        for sandbox, result in zip(sandboxes, results, strict=True):
            print(f"{sandbox['id']}: {'deleted' if result.ok else result.message}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        raise SystemExit(__doc__)
    asyncio.run(main(sys.argv[1], "--force" in sys.argv[2:]))
