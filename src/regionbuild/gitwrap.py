# src/regionbuild/gitwrap.py: Safe subprocess wrappers for Git.
# This module provides functions for interacting with the system's 'git' command
# in a safe and controlled manner. It uses subprocess execution with timeouts,
# environment variable scrubbing, and clear error handling, and parses the
# log output the decision engine needs into Changeset values.

import os
import subprocess
from pathlib import Path
from typing import List, Optional

from .models import Changeset
from .util.errors import GitError

# Record separator placed before each commit in 'git log' output.
_RECORD_SEP = "\x1e"

# --- Core Git Execution ---

def run_git(
    args: List[str],
    cwd: Path,
    timeout: int = 120,
    check: bool = True,
    env: Optional[dict] = None,
) -> subprocess.CompletedProcess:
    """
    Runs a git command in a specified directory with a timeout and error handling.

    Args:
        args: A list of arguments for the git command.
        cwd: The working directory for the command.
        timeout: The command timeout in seconds.
        check: If True, raises GitError on a non-zero exit code.
        env: An optional dictionary of environment variables.

    Returns:
        The CompletedProcess object.

    Raises:
        GitError: If git is not found, the command fails, or it times out.
    """
    if not cwd.is_dir():
        raise GitError(f"Git working directory not found: {cwd}")

    base_env = os.environ.copy()
    base_env["GIT_TERMINAL_PROMPT"] = "0"
    if env:
        base_env.update(env)

    try:
        process = subprocess.run(
            ["git"] + args,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            timeout=timeout,
            check=check,
            env=base_env,
        )
        return process
    except FileNotFoundError:
        raise GitError("The 'git' command was not found. Is it installed and in your PATH?")
    except subprocess.CalledProcessError as e:
        error_message = (e.stderr or "").strip() or (e.stdout or "").strip()
        raise GitError(f"Git command '{' '.join(args)}' failed: {error_message}")
    except subprocess.TimeoutExpired:
        raise GitError(f"Git command '{' '.join(args)}' timed out after {timeout} seconds.")


# --- High-Level Git Operations ---

def git_is_work_tree(cwd: Path) -> bool:
    """Checks whether `cwd` is inside a git work tree."""
    result = run_git(["rev-parse", "--is-inside-work-tree"], cwd=cwd, check=False)
    return result.returncode == 0 and result.stdout.strip() == "true"

def git_remote_names(cwd: Path) -> List[str]:
    """Lists configured remotes in git's order."""
    result = run_git(["remote"], cwd=cwd)
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]

def git_rev_parse(cwd: Path, ref: str) -> str:
    """Resolves a reference to a full commit SHA."""
    result = run_git(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], cwd=cwd, check=False)
    sha = result.stdout.strip()
    if result.returncode != 0 or not sha:
        raise GitError(f"Cannot resolve git reference '{ref}'")
    return sha

def git_commit_exists(cwd: Path, commit: str) -> bool:
    """Checks that a commit object is present in the local repository."""
    result = run_git(["cat-file", "-e", f"{commit}^{{commit}}"], cwd=cwd, check=False)
    return result.returncode == 0

_C_ESCAPES = {
    "a": 0x07, "b": 0x08, "f": 0x0C, "n": 0x0A, "r": 0x0D, "t": 0x09, "v": 0x0B,
    "\\": 0x5C, '"': 0x22,
}

def unquote_path(path: str) -> str:
    """
    Decodes a path git printed in C-quoted form ("docs/r\\303\\251sum\\303\\251.md").

    Unquoted paths are returned untouched, surrounding spaces included.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\" or i + 1 == len(body):
            raw.extend(char.encode("utf-8", "surrogateescape"))
            i += 1
            continue
        escape = body[i + 1]
        octal = body[i + 1:i + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            raw.append(int(octal, 8))
            i += 4
        elif escape in _C_ESCAPES:
            raw.append(_C_ESCAPES[escape])
            i += 2
        else:
            raw.extend(("\\" + escape).encode("utf-8", "surrogateescape"))
            i += 2
    return raw.decode("utf-8", "surrogateescape")

def parse_log_output(output: str) -> List[Changeset]:
    """Parses 'git log --format=%x1e%H --name-only' output, newest commit first."""
    changesets = []
    for record in output.split(_RECORD_SEP):
        lines = record.split("\n")
        revision = lines[0].strip()
        if not revision:
            continue
        # Path lines keep their spaces; only the blank separator lines go.
        paths = tuple(unquote_path(line) for line in lines[1:] if line)
        changesets.append(Changeset(revision=revision, paths=paths))
    return changesets

def git_log_changesets(cwd: Path, since: str, until: str) -> List[Changeset]:
    """Lists the changesets reachable from `until` but not from `since`."""
    result = run_git(
        [
            "-c", "core.quotePath=false",
            "log", "--no-color", "--format=%x1e%H", "--name-only", f"{since}..{until}", "--",
        ],
        cwd=cwd,
    )
    return parse_log_output(result.stdout)
