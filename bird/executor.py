"""
birdc process execution.

Every query runs as `<bird_cmd> -r show <args...>`. The `-r` flag keeps
birdc in restricted (read-only) mode and is never optional.
"""

import logging
import subprocess

from bird.errors import BirdUnreachableError

logger = logging.getLogger(__name__)

RESTRICTED_PREFIX = ["-r", "show"]


class BirdExecutor:
    """Runs birdc and returns its raw stdout."""

    def __init__(self, bird_cmd: str = "birdc", timeout: float = 30.0):
        self.bird_cmd = bird_cmd
        self.timeout = timeout

    def build_argv(self, args: str) -> list[str]:
        """Command line for a query; arguments are split on single spaces."""
        return [self.bird_cmd, *RESTRICTED_PREFIX, *args.split(" ")]

    def run(self, args: str) -> bytes:
        """
        Execute a `show` query against the daemon.

        Args:
            args: query after `show`, e.g. "protocols all"

        Returns:
            Raw stdout bytes

        Raises:
            BirdUnreachableError: spawn failure, timeout or non-zero exit
        """
        argv = self.build_argv(args)

        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"birdc timed out after {self.timeout}s: {args}")
            raise BirdUnreachableError(f"birdc timed out after {self.timeout}s")
        except FileNotFoundError:
            logger.warning(f"birdc not found at {self.bird_cmd}")
            raise BirdUnreachableError(f"{self.bird_cmd} not found - is BIRD installed?")
        except OSError as e:
            logger.warning(f"Failed to run birdc: {e}")
            raise BirdUnreachableError(f"Failed to run birdc: {e}")

        if result.returncode != 0:
            stderr = result.stderr.decode(errors="replace").strip()
            logger.warning(f"birdc exited with {result.returncode}: {stderr or 'no output'}")
            raise BirdUnreachableError(
                f"birdc exited with {result.returncode}", returncode=result.returncode
            )

        return result.stdout
