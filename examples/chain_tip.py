"""
Print the chain tip of a node configured through BITCOIND_* variables.

    BITCOIND_URL=http://127.0.0.1:18443 \
    BITCOIND_COOKIE_FILE=~/.bitcoin/regtest/.cookie \
    BITCOIND_PROTOCOL_VERSION=29 \
    python examples/chain_tip.py
"""

import sys

from loguru import logger

from bitcoind_client import BitcoindClientError, Client
from bitcoind_client.config import load_config


def main() -> int:
    try:
        client = Client.from_config(load_config())
        tip = client.get_best_block_hash()
        header = client.get_block_header_verbose(tip)
    except BitcoindClientError as e:
        logger.error(f"Failed to read chain tip: {e}")
        return 1

    print(f"height      {header.height}")
    print(f"hash        {header.hash}")
    print(f"time        {header.time}")
    print(f"bits        {header.bits:08x}")
    print(f"target      {header.target:064x}")
    print(f"chain work  {header.chain_work:064x}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
