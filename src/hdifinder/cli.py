"""Command line interface for hdifinder."""

from __future__ import annotations

import logging
import time
from typing import Optional

import typer

from hdifinder.config import SearchConfig
from hdifinder.errors import InvalidConfiguration
from hdifinder.hd_key import get_engine
from hdifinder.search import search
from hdifinder.wallet import WalletContext, account_path, private_key_wif

logger = logging.getLogger(__name__)

app = typer.Typer(help="Find the HD derivation index that produces an address")

EXIT_NOT_FOUND = 1
EXIT_BAD_INPUT = 2


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_config(**overrides) -> SearchConfig:
    """Environment config with explicitly passed options layered on top."""
    config = SearchConfig.from_env(validate=False)
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)
    return config.validate()


def _log_progress(done: int, total: int) -> None:
    logger.debug("Chunks done: %d/%d (%.1f%%)", done, total, 100 * done / total)


@app.command()
def find(
    mnemonic: str = typer.Argument(..., help="BIP39 mnemonic phrase"),
    address: str = typer.Argument(..., help="The address to be found"),
    passphrase: Optional[str] = typer.Option(None, "--passphrase", "-p", help="The mnemonic passphrase"),
    start: Optional[int] = typer.Option(None, "--start", "-s", help="First index to search"),
    end: Optional[int] = typer.Option(None, "--end", "-e", help="End index (exclusive)"),
    chunk_size: Optional[int] = typer.Option(None, "--chunksize", "-c", help="Indices per worker task"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Pool size (default: CPU count)"),
    strategy: Optional[str] = typer.Option(None, help="first (fastest match) or lowest (lowest index)"),
    executor: Optional[str] = typer.Option(None, help="process or thread"),
    purpose: Optional[int] = typer.Option(None, help="BIP purpose: 44, 49 or 84"),
    network: Optional[str] = typer.Option(None, help="bitcoin or testnet"),
    show_key: bool = typer.Option(False, "--show-key", help="Print the WIF private key of the match"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search MNEMONIC's derivation indices for ADDRESS."""
    _setup_logging(verbose)
    try:
        config = _build_config(
            passphrase=passphrase, start=start, end=end, chunk_size=chunk_size,
            workers=workers, strategy=strategy, executor=executor,
            purpose=purpose, network=network,
        )
        context = WalletContext.from_mnemonic(
            mnemonic, config.passphrase, **config.wallet_params()
        )
    except InvalidConfiguration as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_BAD_INPUT)

    logger.info(
        "Searching %s/[%d..%d) with %s", account_path(context), config.start, config.end, get_engine()
    )
    t0 = time.time()
    result = search(
        context,
        config.search_range,
        config.chunk_size,
        address,
        workers=config.workers,
        strategy=config.strategy,
        executor=config.executor,
        on_progress=_log_progress,
    )
    logger.info("Search finished in %.1fs", time.time() - t0)

    if result is None:
        typer.echo(f"address {address} not found between index {config.start} and {config.end}")
        raise typer.Exit(EXIT_NOT_FOUND)

    typer.echo(
        f"address {result.value} found at index {result.index}. address type: {result.kind}"
    )
    if show_key:
        typer.echo(f"private key (WIF): {private_key_wif(context, result.index)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
