import argparse
import logging
from pathlib import Path
from typing import Optional

from jupiter_swap_api import (
    ClientConfig,
    QuoteRequest,
    SwapApiClient,
    SwapApiError,
    SwapRequest,
    TransactionConfig,
    load_config,
)

USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
NATIVE_MINT = "So11111111111111111111111111111111111111112"
TEST_WALLET = "2AQdpHJ2JpcEgPiATUXjQxA8QmafFegfQwSLWSprPicm"


def run_example(config: ClientConfig, user_public_key: str) -> None:
    print(f"Using base url: {config.base_url}")
    with SwapApiClient(config) as client:
        quote_response = client.quote(
            QuoteRequest(input_mint=USDC_MINT, output_mint=NATIVE_MINT, amount=1_000_000, slippage_bps=50)
        )
        print(f"Quote: {quote_response.in_amount} -> {quote_response.out_amount}")

        request = SwapRequest(
            user_public_key=user_public_key,
            quote_response=quote_response,
            config=TransactionConfig(),
        )
        swap_response = client.swap(request)
        print(f"Raw tx len: {len(swap_response.swap_transaction)}")

        versioned_transaction = swap_response.to_versioned_transaction()
        print(f"Signers required: {versioned_transaction.message.header.num_required_signatures}")

        swap_instructions = client.swap_instructions(request)
        print(f"Swap instructions: {len(swap_instructions.instructions())}")


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="Quote and build a USDC -> SOL swap")
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML config file")
    parser.add_argument("--user", default=TEST_WALLET, help="User public key")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    config = load_config(args.config) if args.config else ClientConfig.from_env()
    try:
        run_example(config, args.user)
    except SwapApiError as exc:
        raise SystemExit(f"Swap API request failed: {exc}") from exc


if __name__ == "__main__":
    main()
