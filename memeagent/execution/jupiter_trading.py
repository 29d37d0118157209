"""Live execution through the Jupiter swap aggregator on Solana.

Flow for one swap:
1. GET a quote (input mint -> output mint, raw amount, slippage)
2. POST the quote to the swap endpoint to get a serialized transaction
3. Sign the transaction with the wallet keypair
4. Submit it over RPC and wait for "confirmed" commitment

A swap is reported FILLED only after step 4 succeeds.
"""

from __future__ import annotations

import asyncio
import base64
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from loguru import logger
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TokenAccountOpts, TxOpts
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from ..constants import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_SLIPPAGE_BPS,
    JUPITER_QUOTE_URL,
    JUPITER_SWAP_URL,
    LAMPORTS_PER_SOL,
    WRAPPED_SOL_MINT,
)
from ..exceptions import ExecutionError
from ..models import ExecutionResult, ExecutionStatus, TradeSide
from .interfaces import ExecutionVenue

MintResolver = Callable[[str], Awaitable[Optional[str]]]


class JupiterExecutionVenue(ExecutionVenue):
    """Swaps SOL <-> token through Jupiter and confirms on-chain."""

    def __init__(
        self,
        rpc_client: AsyncClient,
        keypair: Keypair,
        mint_resolver: MintResolver,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        quote_url: str = JUPITER_QUOTE_URL,
        swap_url: str = JUPITER_SWAP_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._rpc = rpc_client
        self._keypair = keypair
        self._resolve_mint = mint_resolver
        self._slippage_bps = int(slippage_bps)
        self._timeout = timeout
        self._quote_url = quote_url
        self._swap_url = swap_url
        self._transport = transport
        # mints resolved at buy time are reused for the sell
        self._mints: Dict[str, str] = {}

    @property
    def public_key(self) -> Pubkey:
        return self._keypair.pubkey()

    # ------------------------------------------------------------------
    # Jupiter HTTP helpers

    async def _get_quote(self, input_mint: str, output_mint: str, amount: int) -> Dict:
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": amount,
            "slippageBps": self._slippage_bps,
        }
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            resp = await client.get(self._quote_url, params=params)
            resp.raise_for_status()
            quote = resp.json()
        if not quote or not quote.get("outAmount"):
            raise ExecutionError(f"No Jupiter route for {input_mint} -> {output_mint}")
        return quote

    async def _build_swap(self, quote: Dict[str, Any]) -> VersionedTransaction:
        payload = {
            "quoteResponse": quote,
            "userPublicKey": str(self.public_key),
            "wrapAndUnwrapSol": True,
            "dynamicComputeUnitLimit": True,
            "prioritizationFeeLamports": "auto",
        }
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            resp = await client.post(self._swap_url, json=payload)
            resp.raise_for_status()
            data = resp.json()
        encoded = data.get("swapTransaction")
        if not encoded:
            raise ExecutionError("Jupiter swap response is missing swapTransaction")
        return VersionedTransaction.from_bytes(base64.b64decode(encoded))

    # ------------------------------------------------------------------
    # RPC helpers

    async def _send_and_confirm(self, unsigned: VersionedTransaction) -> str:
        signed = VersionedTransaction(unsigned.message, [self._keypair])
        resp = await self._rpc.send_raw_transaction(
            bytes(signed),
            opts=TxOpts(skip_preflight=False, preflight_commitment=Confirmed),
        )
        signature = resp.value
        confirmation = await asyncio.wait_for(
            self._rpc.confirm_transaction(signature, commitment=Confirmed),
            timeout=max(self._timeout, 60.0),
        )
        statuses = confirmation.value or []
        status = statuses[0] if statuses else None
        if status is None or status.err is not None:
            err = status.err if status is not None else "not found"
            raise ExecutionError(f"Transaction {signature} failed: {err}")
        return str(signature)

    async def _token_balance(self, mint: str) -> int:
        resp = await self._rpc.get_token_accounts_by_owner_json_parsed(
            self.public_key, TokenAccountOpts(mint=Pubkey.from_string(mint))
        )
        total = 0
        for account in resp.value or []:
            info = account.account.data.parsed.get("info", {})
            total += int(info.get("tokenAmount", {}).get("amount", 0))
        return total

    async def _mint_for(self, symbol: str) -> str:
        mint = self._mints.get(symbol)
        if mint is None:
            mint = await self._resolve_mint(symbol)
            if not mint:
                raise ExecutionError(f"Cannot resolve token mint for {symbol}")
            self._mints[symbol] = mint
        return mint

    async def _swap(
        self, symbol: str, side: TradeSide, size: Optional[float], build: Callable
    ) -> ExecutionResult:
        try:
            signature = await build()
        except (ExecutionError, httpx.HTTPError, asyncio.TimeoutError) as exc:
            logger.error("{} {} failed: {}", side.value, symbol, exc)
            return ExecutionResult(
                symbol=symbol,
                side=side,
                status=ExecutionStatus.REJECTED,
                size_in_base_units=size,
                reason=str(exc) or type(exc).__name__,
            )
        except Exception as exc:  # noqa: BLE001  RPC client errors vary by transport
            logger.exception("{} {} errored", side.value, symbol)
            return ExecutionResult(
                symbol=symbol,
                side=side,
                status=ExecutionStatus.ERROR,
                size_in_base_units=size,
                reason=str(exc) or type(exc).__name__,
            )

        logger.info("{} {} confirmed: {}", side.value, symbol, signature)
        return ExecutionResult(
            symbol=symbol,
            side=side,
            status=ExecutionStatus.FILLED,
            size_in_base_units=size,
            tx_signature=signature,
        )

    # ------------------------------------------------------------------
    # ExecutionVenue

    async def submit_buy(
        self, symbol: str, size_in_base_units: float
    ) -> ExecutionResult:
        async def _build() -> str:
            mint = await self._mint_for(symbol)
            lamports = int(size_in_base_units * LAMPORTS_PER_SOL)
            quote = await self._get_quote(WRAPPED_SOL_MINT, mint, lamports)
            return await self._send_and_confirm(await self._build_swap(quote))

        return await self._swap(symbol, TradeSide.BUY, size_in_base_units, _build)

    async def submit_sell(
        self, symbol: str, size_in_base_units: Optional[float] = None
    ) -> ExecutionResult:
        async def _build() -> str:
            mint = await self._mint_for(symbol)
            amount = await self._token_balance(mint)
            if amount <= 0:
                raise ExecutionError(f"No {symbol} balance to sell")
            quote = await self._get_quote(mint, WRAPPED_SOL_MINT, amount)
            return await self._send_and_confirm(await self._build_swap(quote))

        return await self._swap(symbol, TradeSide.SELL, size_in_base_units, _build)

    async def close(self) -> None:
        await self._rpc.close()
