"""Settlement chain client built on web3.py."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Sequence

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.middleware.proof_of_authority import ExtraDataToPOAMiddleware

logger = logging.getLogger(__name__)

WEI_PER_ETH = Decimal(10) ** 18
WEI_PER_GWEI = Decimal(10) ** 9


class ChainError(RuntimeError):
    pass


def settlement_pool_abi(function_name: str, kind: str) -> list[dict[str, Any]]:
    """ABI for the league pool's single-argument forwarding function."""
    arg_type = "address" if kind == "address" else "string"
    arg_name = "tokenAddress" if kind == "address" else "tokenName"
    return [
        {
            "inputs": [{"internalType": arg_type, "name": arg_name, "type": arg_type}],
            "name": function_name,
            "outputs": [],
            "stateMutability": "nonpayable",
            "type": "function",
        }
    ]


def parameterless_abi(function_name: str) -> list[dict[str, Any]]:
    return [
        {
            "inputs": [],
            "name": function_name,
            "outputs": [],
            "stateMutability": "nonpayable",
            "type": "function",
        }
    ]


ERC20_DECIMALS_ABI: list[dict[str, Any]] = [
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"internalType": "uint8", "name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    }
]


@dataclass(frozen=True)
class TransactionIntent:
    to: str
    abi: list[dict[str, Any]]
    function: str
    args: tuple[Any, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FeeParameters:
    gas_limit: int
    gas_price_wei: int


class ChainClient:
    def __init__(
        self,
        rpc_url: str,
        chain_id: Optional[int] = None,
        private_key: Optional[str] = None,
        keystore_path: Optional[Path] = None,
        keystore_password: Optional[str] = None,
        receipt_timeout_seconds: int = 600,
    ) -> None:
        self.web3 = Web3(Web3.HTTPProvider(rpc_url))
        # Ensure compatibility with rollups that use Clique-like extra data
        self.web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        self._chain_id = chain_id
        self.receipt_timeout_seconds = receipt_timeout_seconds
        self._account: Optional[LocalAccount] = None

        if private_key:
            self._account = Account.from_key(private_key)
        elif keystore_path and keystore_password:
            with Path(keystore_path).expanduser().open("r", encoding="utf-8") as handle:
                data = json.load(handle)
            self._account = Account.from_key(Account.decrypt(data, keystore_password))

    @property
    def sender(self) -> Optional[str]:
        if self._account is None:
            return None
        return self._account.address

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = int(self.web3.eth.chain_id)
        return self._chain_id

    def _contract(self, address: str, abi: Sequence[dict[str, Any]]):
        return self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=list(abi))

    def encode(self, intent: TransactionIntent) -> str:
        return self._contract(intent.to, intent.abi).encode_abi(intent.function, args=list(intent.args))

    def gas_price(self) -> int:
        return int(self.web3.eth.gas_price)

    def estimate_gas(self, intent: TransactionIntent) -> int:
        payload: dict[str, Any] = {
            "to": Web3.to_checksum_address(intent.to),
            "data": self.encode(intent),
        }
        if self.sender:
            payload["from"] = self.sender
        return int(self.web3.eth.estimate_gas(payload))

    def get_balance(self) -> int:
        sender = self.sender
        if not sender:
            raise ChainError("Chain client missing sender address")
        return int(self.web3.eth.get_balance(sender))

    def call(
        self,
        address: str,
        abi: Sequence[dict[str, Any]],
        function_name: str,
        *args: Any,
    ) -> Any:
        """Invoke a read-only contract function."""
        contract = self._contract(address, abi)
        fn = contract.get_function_by_name(function_name)
        return fn(*args).call()

    def submit(self, intent: TransactionIntent, fees: FeeParameters) -> str:
        if self._account is None:
            raise ChainError("Chain client has no signing key configured")
        sender = self._account.address

        to_checksum = Web3.to_checksum_address(intent.to)
        nonce = self.web3.eth.get_transaction_count(sender, block_identifier="pending")
        tx: dict[str, Any] = {
            "chainId": self.chain_id,
            "nonce": nonce,
            "to": to_checksum,
            "value": 0,
            "data": self.encode(intent),
            "gas": int(fees.gas_limit),
            "gasPrice": int(fees.gas_price_wei),
        }

        signed = Account.sign_transaction(tx, self._account.key)
        raw = getattr(signed, "raw_transaction", None) or getattr(signed, "rawTransaction", None)
        if raw is None:
            raise ChainError("Signed transaction missing raw bytes")
        tx_hash = Web3.to_hex(self.web3.eth.send_raw_transaction(raw))
        logger.info(
            "Submitted tx %s: %s.%s (gas=%s gasPrice=%s wei)",
            tx_hash,
            to_checksum,
            intent.function,
            fees.gas_limit,
            fees.gas_price_wei,
        )
        return tx_hash

    def wait_for_receipt(self, tx_hash: str):
        """Block until the transaction is mined; raise ChainError on revert."""
        receipt = self.web3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout_seconds)
        raw_status = receipt.get("status", 1)
        status = 1 if raw_status is None else int(raw_status)
        if status != 1:
            raise ChainError(f"Transaction {tx_hash} reverted (status={status})")
        return receipt


__all__ = [
    "ChainClient",
    "ChainError",
    "ERC20_DECIMALS_ABI",
    "FeeParameters",
    "TransactionIntent",
    "WEI_PER_ETH",
    "WEI_PER_GWEI",
    "parameterless_abi",
    "settlement_pool_abi",
]
