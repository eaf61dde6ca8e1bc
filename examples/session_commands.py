"""Session command example.

This example demonstrates:
- Running a one-shot command and reading its exit code
- Creating a session and starting a command asynchronously
- Polling the command until it exits, then fetching its logs
"""

import asyncio
import os
import sys

from daytona_mcp import Toolbox


async def main() -> None:
    if not os.environ.get("DAYTONA_API_KEY"):
        raise RuntimeError(
            "Missing DAYTONA_API_KEY. Set it in your environment before running this example."
        )
    if len(sys.argv) < 2:
        raise SystemExit("usage: session_commands.py SANDBOX_ID")
    sandbox_id = sys.argv[1]

    async with Toolbox.from_env() as toolbox:
        # One-shot execution blocks until the command exits
        result = await toolbox.sessions.execute_command(sandbox_id, "uname -a")
        print(result.render())

        session = await toolbox.sessions.create_session(sandbox_id, "example")
        if not session.ok:
            print(session.render())
            return

        started = await toolbox.sessions.execute_session_command(
            sandbox_id, "example", "sleep 3 && echo finished", run_async=True
        )
        command_id = started.payload.command_id
        print(f"Started command {command_id}")

        while True:
            status = await toolbox.sessions.get_session_command(sandbox_id, "example", command_id)
            if not status.ok or not status.payload.running:
                break
            await asyncio.sleep(1)
        print(f"Exit code: {status.payload.exit_code}")

        logs = await toolbox.sessions.get_session_command_logs(sandbox_id, "example", command_id)
        print(logs.render())

        await toolbox.sessions.delete_session(sandbox_id, "example")


if __name__ == "__main__":
    asyncio.run(main())
