"""Example autocomplete providers, one per supported shape"""

import asyncio
import os
import subprocess
import threading


def git_subcommands(text):
    """Synchronous provider"""
    return ["add", "commit", "diff", "log", "pull", "push", "status"]


def branches(text, deliver):
    """Callback provider delivering from a worker thread"""

    def _list():
        try:
            output = subprocess.run(
                ["git", "branch", "--format=%(refname:short)"], capture_output=True, text=True, timeout=5
            ).stdout
        except (OSError, subprocess.SubprocessError):
            output = ""
        deliver(output.split())

    threading.Thread(target=_list, daemon=True).start()


async def services(text):
    """Async provider"""
    await asyncio.sleep(0.05)
    return ["api", "billing", "frontend", "worker"]


def directories(text):
    base = os.path.dirname(text) or "."
    try:
        entries = sorted(os.listdir(base))
    except OSError:
        return []
    return [os.path.join(os.path.dirname(text), entry) + "/" for entry in entries if os.path.isdir(os.path.join(base, entry))]
