"""LTC address balances and transaction history via BlockCypher."""
import httpx
from pydantic import BaseModel

from ltc_tracker.providers.core import HTTPProviderABC
from ltc_tracker.providers.core.utils import litoshi_to_ltc
from ltc_tracker.schemas import AddressSummary, Transaction


class AddressParams(BaseModel):
    """Params for /addrs/{address}."""

    txlimit: int = 100
    includetx: str = "true"


class BlockCypherProvider(HTTPProviderABC):
    """Read-only client for BlockCypher's LTC main-net address endpoint.

    Errors are raised as httpx exceptions; callers map them to HTTP with
    UpstreamErrorMapper.
    """

    BASE_URL = "https://api.blockcypher.com/v1/ltc/main"

    def __init__(
        self,
        base_url: str = BASE_URL,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, client=client)

    async def get_address(self, address: str) -> AddressSummary:
        """Fetch balance totals and up to 100 transaction refs for ``address``."""
        response = await self._client.get(
            f"/addrs/{address}", params=AddressParams().model_dump()
        )
        response.raise_for_status()
        return self._summary_from_payload(address, response.json())

    @staticmethod
    def _transaction_from_ref(ref: dict) -> Transaction:
        value = int(ref.get("value", 0))
        return Transaction(
            txid=ref["tx_hash"],
            confirmed=ref.get("confirmed"),
            value=value,
            confirmations=ref.get("confirmations", 0),
            block_height=ref.get("block_height"),
            double_spend=bool(ref.get("double_spend", False)),
            # tx_input_n == -1 marks an output paying this address
            direction="received" if ref.get("tx_input_n") == -1 else "sent",
            amount_ltc=litoshi_to_ltc(value),
        )

    def _summary_from_payload(self, address: str, data: dict) -> AddressSummary:
        return AddressSummary(
            address=address,
            total_received=data.get("total_received") or 0,
            total_sent=data.get("total_sent") or 0,
            balance=data.get("balance") or 0,
            final_balance=data.get("final_balance") or 0,
            tx_count=data.get("n_tx") or 0,
            unconfirmed_tx_count=data.get("unconfirmed_n_tx") or 0,
            transactions=[
                self._transaction_from_ref(ref) for ref in data.get("txrefs") or []
            ],
        )
