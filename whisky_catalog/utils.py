"""Helper utilities.

This module centralises the file write primitive shared by the CSV and
rating stores, and the retry policy applied to outgoing mail.
"""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Tuple, Type, Union

from tenacity import (after_log, retry, retry_if_exception_type,
                      stop_after_attempt, wait_exponential)


logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


@contextmanager
def atomic_write(path: PathLike, encoding: str = "utf-8", newline: str | None = None) -> Iterator[IO[str]]:
    """Open a temporary file next to `path` and move it into place on success.

    Readers see either the previous document or the complete new one, never
    a truncated file.  The parent directory is created when missing.  On
    error the temporary file is removed and the exception propagates.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline=newline) as fh:
            yield fh
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def retryable(
    exceptions: Tuple[Type[BaseException], ...],
    *,
    max_attempts: int = 3,
    backoff: float = 1.0,
    max_wait: float = 10.0,
):
    """Decorator factory applying the retry policy to a flaky call.

    Retries are attempted only for the given exception types.  Waits grow
    exponentially from `backoff` seconds up to `max_wait`; a `backoff` of 0
    retries immediately.  The last exception is re-raised once attempts run
    out.
    """
    return retry(
        reraise=True,
        stop=stop_after_attempt(max(1, int(max_attempts))),
        wait=wait_exponential(multiplier=backoff, max=max_wait),
        retry=retry_if_exception_type(exceptions),
        after=after_log(logger, logging.WARNING),
    )


__all__ = ["atomic_write", "retryable"]
