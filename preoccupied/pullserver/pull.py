"""
Git pull invocation and outcome classification for the pullserver application.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)


NOOP_MARKER = 'Already up to date.'

APPLIED = 'applied'
NOOP = 'noop'
FAILED = 'failed'


@dataclass(frozen=True)
class CommandResult:
    """
    Exit status and decoded output of a finished subprocess
    """

    returncode: int
    stdout: str
    stderr: str


    @property
    def success(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class PullOutcome:
    """
    Classified result of a pull, ready to be sent as an HTTP response
    """

    kind: str
    status_code: int
    body: str


def decode(data: Optional[bytes]) -> str:
    """
    Permissively decode captured process output. Invalid sequences are
    replaced rather than raising.
    """

    if not data:
        return ''
    return data.decode('utf-8', errors='replace')


async def run(*args: str, cwd: str = None) -> CommandResult:
    logger.debug(f'Running {args} in {cwd or "current directory"}')
    process = await asyncio.create_subprocess_exec(
        *args,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE
    )
    stdout, stderr = await process.communicate()
    return CommandResult(process.returncode, decode(stdout), decode(stderr))


async def git_head() -> Optional[str]:
    """
    Commit hash of HEAD in the current directory, or None if it cannot
    be determined (no commits yet, not a repository, git missing)
    """

    try:
        result = await run('git', 'rev-parse', 'HEAD')
    except OSError as e:
        logger.debug(f'Unable to run git rev-parse: {e}')
        return None

    if not result.success:
        return None
    return result.stdout.strip() or None


def failed(reason: str) -> PullOutcome:
    """
    Failure outcome carrying the given reason
    """

    return PullOutcome(FAILED, 500, f'Error applying changes: {reason}')


def classify(
        result: CommandResult,
        noop_status: int = 208,
        changed: Optional[bool] = None) -> PullOutcome:
    """
    Map a finished git pull onto an outcome. The first match wins:

    * non-zero exit status is a failure, reporting stderr
    * no change is a no-op. When ``changed`` is None, a change is
      detected by the absence of the up-to-date marker in stdout
    * anything else is applied, reporting stdout
    """

    if not result.success:
        return failed(result.stderr.strip())

    output = result.stdout.strip()
    if changed is None:
        changed = NOOP_MARKER not in output

    if not changed:
        # 204 responses may not carry a body
        body = '' if noop_status == 204 else 'No changes to apply'
        return PullOutcome(NOOP, noop_status, body)

    return PullOutcome(APPLIED, 200, f'Changes applied: {output}')


async def pull_changes(
        noop_status: int = 208,
        change_detection: str = 'marker') -> PullOutcome:
    """
    Run ``git pull`` in the current working directory and classify the
    result. A command that cannot be launched at all is reported as a
    failure rather than raised.
    """

    track_head = change_detection == 'head'
    before = await git_head() if track_head else None

    try:
        result = await run('git', 'pull')
    except OSError as e:
        logger.error(f'Unable to launch git pull: {e}', exc_info=True)
        return failed(str(e))

    changed = None
    if track_head and result.success:
        after = await git_head()
        if before is not None and after is not None:
            changed = before != after

    outcome = classify(result, noop_status=noop_status, changed=changed)

    if outcome.kind == APPLIED:
        # echo what was pulled to the server's stdout
        print(result.stdout.strip(), flush=True)
        logger.info('Changes applied')
    elif outcome.kind == NOOP:
        logger.info('No changes to apply')
    else:
        logger.error(f'git pull exited with status {result.returncode}: {result.stderr.strip()}')

    return outcome


# The end.
