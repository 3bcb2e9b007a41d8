# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
from pathlib import Path
from typing import List, Optional
import logging

import typer

from ..adapters.local_fs import LocalFS
from ..adapters.md5_digest import MD5Digest
from ..domain.errors import ConfigurationError
from ..domain.models import DEFAULT_EXCLUSIONS, SMALL_FILE_THRESHOLD, WalkConfig
from ..services import BenchmarkService

from ..logging_config import setup_logging

setup_logging()

app = typer.Typer(help="Forkwalk CLI - parallel directory walk and digest benchmark")

USAGE = "Choose a directory where to go"

logger = logging.getLogger(__name__)


def _parse_levels(levels: Optional[List[int]]) -> List[int]:
    """
    Validate --parallelism values, keeping their order and dropping repeats.
    Raises Typer BadParameter if any level is below 1.
    """
    if not levels:
        return []
    bad = sorted({lv for lv in levels if lv < 1})
    if bad:
        raise typer.BadParameter(
            f"Parallelism must be at least 1, got: {', '.join(map(str, bad))}"
        )
    return list(dict.fromkeys(levels))


def _wire(
    exclude: Optional[List[str]],
    small_file_threshold: int,
    print_hex: bool,
    print_dir: bool,
) -> BenchmarkService:
    """
    Minimal composition root:
      LocalFS + MD5Digest + WalkConfig
    """
    try:
        config = WalkConfig(
            print_hex=print_hex,
            print_dir=print_dir,
            small_file_threshold=small_file_threshold,
            exclusions=tuple(exclude) if exclude else DEFAULT_EXCLUSIONS,
            echo=typer.echo,
        )
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))
    return BenchmarkService(LocalFS(), MD5Digest(), config)


def _set_verbose(verbose: bool) -> None:
    if verbose:
        setup_logging(verbose=True)
        logger.debug("Verbose logging enabled")


# ------------------------------
# CLI Commands
# ------------------------------


@app.command()
def bench(
    path: Optional[Path] = typer.Argument(
        None,
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory to walk",
    ),
    parallelism: Optional[List[int]] = typer.Option(
        None,
        "--parallelism",
        "-p",
        help="Worker pool size; repeat for several. Defaults to 1, 2, 4 and the core count.",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        help="Directory path suffix to skip; repeat for several. Replaces the defaults.",
    ),
    small_file_threshold: int = typer.Option(
        SMALL_FILE_THRESHOLD,
        "--small-file-threshold",
        help="Files below this many bytes are read whole; larger ones are streamed.",
    ),
    print_hex: bool = typer.Option(
        False, "--print-hex", envvar="FORKWALK_PRINT_HEX", help="Print every digest."
    ),
    print_dir: bool = typer.Option(
        False,
        "--print-dir",
        envvar="FORKWALK_PRINT_DIR",
        help="Print every visited directory.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Walk a directory at several parallelism levels, without and then with hashing.
    """
    if path is None:
        typer.echo(USAGE)
        return

    _set_verbose(verbose)
    levels = _parse_levels(parallelism)
    service = _wire(exclude, small_file_threshold, print_hex, print_dir)

    typer.echo(f"Walking on {path}")
    for result in service.sweep(path, levels=levels):
        typer.echo(result.summary())


@app.command()
def walk(
    path: Optional[Path] = typer.Argument(
        None,
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory to walk",
    ),
    parallelism: int = typer.Option(
        os.cpu_count() or 1, "--parallelism", "-p", help="Worker pool size."
    ),
    hashing: bool = typer.Option(
        True, "--hash/--no-hash", help="Digest file content, or only read metadata."
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        help="Directory path suffix to skip; repeat for several. Replaces the defaults.",
    ),
    small_file_threshold: int = typer.Option(
        SMALL_FILE_THRESHOLD,
        "--small-file-threshold",
        help="Files below this many bytes are read whole; larger ones are streamed.",
    ),
    print_hex: bool = typer.Option(
        False, "--print-hex", envvar="FORKWALK_PRINT_HEX", help="Print every digest."
    ),
    print_dir: bool = typer.Option(
        False,
        "--print-dir",
        envvar="FORKWALK_PRINT_DIR",
        help="Print every visited directory.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Walk a directory once with a single configuration.
    """
    if path is None:
        typer.echo(USAGE)
        return

    _set_verbose(verbose)
    (level,) = _parse_levels([parallelism])
    service = _wire(exclude, small_file_threshold, print_hex, print_dir)

    typer.echo(f"Walking on {path}")
    typer.echo(service.run_once(path, level, hashing).summary())
