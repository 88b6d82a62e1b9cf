"""
Canonical, version-independent result models.

Callers consume these regardless of which node protocol version produced the
response; the per-version raw shapes in ``v28``/``v29``/``v30`` convert into them.
"""

from __future__ import annotations

from dataclasses import dataclass

from bitcoind_client.hashes import BlockHash, FilterHash, TxMerkleNode, Txid


@dataclass(frozen=True)
class GetBlockHeaderVerbose:
    """Result of ``getblockheader <hash> true``."""
    hash: BlockHash
    confirmations: int
    height: int
    version: int
    merkle_root: TxMerkleNode
    time: int
    median_time: int
    nonce: int
    bits: int
    target: int
    difficulty: float
    chain_work: int
    n_tx: int
    previous_block_hash: BlockHash | None = None
    next_block_hash: BlockHash | None = None


@dataclass(frozen=True)
class CoinbaseTx:
    """Coinbase summary attached to ``getblock`` from protocol version 30."""
    version: int
    locktime: int
    sequence: int
    coinbase: bytes
    witness: bytes | None = None


@dataclass(frozen=True)
class GetBlockVerboseOne:
    """Result of ``getblock <hash> 1``."""
    hash: BlockHash
    confirmations: int
    size: int
    stripped_size: int
    weight: int
    height: int
    version: int
    merkle_root: TxMerkleNode
    tx: tuple[Txid, ...]
    time: int
    median_time: int
    nonce: int
    bits: int
    target: int
    difficulty: float
    chain_work: int
    n_tx: int
    previous_block_hash: BlockHash | None = None
    next_block_hash: BlockHash | None = None
    coinbase_tx: CoinbaseTx | None = None


@dataclass(frozen=True)
class GetBlockFilter:
    """BIP 157 ``basic`` filter for one block."""
    filter: bytes
    header: FilterHash

