import base64
import json
import unittest

import requests

from jupiter_swap_api.client import SwapApiClient
from jupiter_swap_api.config import ClientConfig
from jupiter_swap_api.errors import ApiError, DecodeError, TransportError
from jupiter_swap_api.http_client import join_url
from jupiter_swap_api.quote import QuoteRequest
from jupiter_swap_api.swap import SwapRequest
from jupiter_swap_api.transaction_config import TransactionConfig

from tests.fakes import FakeResponse, FakeSession

QUOTE_BODY = '{"amount": 1000000, "inputMint": "USDC", "outputMint": "SOL", "otherAmount": 123456}'
SWAP_BODY = {"swapTransaction": base64.b64encode(b"unsigned").decode(), "lastValidBlockHeight": 42}
SWAP_INSTRUCTIONS_BODY = {
    "swapInstruction": {"programId": "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4", "accounts": [], "data": "AQ=="},
}


def make_client(responses, base_url="https://quote.example/v6", api_key=None, timeout=None):
    config = ClientConfig(base_url=base_url, api_key=api_key, timeout=timeout)
    session = FakeSession(responses)
    return SwapApiClient(config, session=session), session


class EndToEndTests(unittest.TestCase):
    def test_quote_then_swap_passes_quote_through_verbatim(self) -> None:
        client, session = make_client([FakeResponse(200, QUOTE_BODY), FakeResponse(200, SWAP_BODY)])

        quote = client.quote(QuoteRequest(input_mint="USDC", output_mint="SOL", amount=1_000_000, slippage_bps=50))

        quote_call = session.calls[0]
        self.assertEqual(quote_call["method"], "GET")
        self.assertEqual(quote_call["url"], "https://quote.example/v6/quote")
        self.assertEqual(
            quote_call["params"],
            {"amount": "1000000", "inputMint": "USDC", "outputMint": "SOL", "slippageBps": "50"},
        )
        self.assertIsNone(quote_call["json"])
        self.assertEqual(quote["amount"], 1000000)
        self.assertEqual(quote.input_mint, "USDC")
        self.assertEqual(quote.output_mint, "SOL")
        self.assertEqual(quote["otherAmount"], 123456)

        swap = client.swap(SwapRequest(user_public_key="user", quote_response=quote))

        swap_call = session.calls[1]
        self.assertEqual(swap_call["method"], "POST")
        self.assertEqual(swap_call["url"], "https://quote.example/v6/swap")
        self.assertEqual(json.dumps(swap_call["json"]["quoteResponse"]), QUOTE_BODY)
        self.assertEqual(swap_call["json"], {"userPublicKey": "user", "quoteResponse": json.loads(QUOTE_BODY)})
        self.assertEqual(swap.swap_transaction, b"unsigned")
        self.assertEqual(swap.last_valid_block_height, 42)

    def test_swap_instructions_posts_same_body_to_its_path(self) -> None:
        client, session = make_client([FakeResponse(200, SWAP_INSTRUCTIONS_BODY)])
        request = SwapRequest(
            user_public_key="user",
            quote_response={"inAmount": "1"},
            config=TransactionConfig(use_shared_accounts=False),
        )

        response = client.swap_instructions(request)

        call = session.last_call()
        self.assertEqual(call["method"], "POST")
        self.assertEqual(call["url"], "https://quote.example/v6/swap-instructions")
        self.assertEqual(call["json"], request.to_payload())
        self.assertEqual(response.swap_instruction.data, b"\x01")

    def test_swap_extra_args_go_to_the_query(self) -> None:
        client, session = make_client([FakeResponse(200, SWAP_BODY)])

        client.swap(SwapRequest(user_public_key="user", quote_response={}), extra_args={"mode": "fast"})

        self.assertEqual(session.last_call()["params"], {"mode": "fast"})


class AuthenticationTests(unittest.TestCase):
    def _run_all(self, client: SwapApiClient) -> None:
        quote = client.quote(QuoteRequest(input_mint="A", output_mint="B", amount=1))
        request = SwapRequest(user_public_key="user", quote_response=quote)
        client.swap(request)
        client.swap_instructions(request)

    def test_no_key_never_sends_header(self) -> None:
        client, session = make_client(
            [FakeResponse(200, {}), FakeResponse(200, SWAP_BODY), FakeResponse(200, SWAP_INSTRUCTIONS_BODY)]
        )

        self._run_all(client)

        self.assertEqual(len(session.calls), 3)
        for call in session.calls:
            self.assertNotIn("x-api-key", {k.lower() for k in call["headers"]})

    def test_key_is_sent_on_every_operation(self) -> None:
        client, session = make_client(
            [FakeResponse(200, {}), FakeResponse(200, SWAP_BODY), FakeResponse(200, SWAP_INSTRUCTIONS_BODY)],
            api_key="secret",
        )

        self._run_all(client)

        self.assertEqual(len(session.calls), 3)
        for call in session.calls:
            self.assertEqual(call["headers"]["x-api-key"], "secret")

    def test_supplied_session_still_follows_config(self) -> None:
        client, session = make_client([FakeResponse(200, {})], api_key="secret", timeout=3.0)

        client.quote(QuoteRequest(input_mint="A", output_mint="B", amount=1))

        self.assertTrue(client.config.authenticated)
        self.assertIs(client.http.session, session)
        self.assertEqual(session.last_call()["headers"]["x-api-key"], "secret")
        self.assertEqual(session.last_call()["timeout"], 3.0)

    def test_constructors(self) -> None:
        self.assertIsNone(SwapApiClient.new("https://quote.example").config.api_key)
        keyed = SwapApiClient.with_api_key("https://quote.example", "k")
        self.assertEqual(keyed.config.api_key, "k")
        self.assertEqual(keyed.http.session.headers["x-api-key"], "k")
        self.assertNotIn("x-api-key", SwapApiClient.new("https://quote.example").http.session.headers)


class ErrorMappingTests(unittest.TestCase):
    def test_non_200_is_api_error_with_body_verbatim(self) -> None:
        body = '{"error":"Could not find any route","errorCode":"COULD_NOT_FIND_ANY_ROUTE"}'
        for status in (400, 429, 500):
            client, _ = make_client([FakeResponse(status, body)])
            with self.assertRaises(ApiError) as ctx:
                client.quote(QuoteRequest(input_mint="A", output_mint="B", amount=1))
            self.assertEqual(ctx.exception.http_status, status)
            self.assertEqual(ctx.exception.body, body)

    def test_non_200_success_family_is_still_an_api_error(self) -> None:
        client, _ = make_client([FakeResponse(201, SWAP_BODY)])

        with self.assertRaises(ApiError):
            client.swap(SwapRequest(user_public_key="user", quote_response={}))

    def test_malformed_json_is_decode_error(self) -> None:
        client, _ = make_client([FakeResponse(200, "{not json")])

        with self.assertRaises(DecodeError) as ctx:
            client.quote(QuoteRequest(input_mint="A", output_mint="B", amount=1))
        self.assertEqual(ctx.exception.body, "{not json")
        self.assertEqual(ctx.exception.http_status, 200)

    def test_non_object_json_is_decode_error(self) -> None:
        client, _ = make_client([FakeResponse(200, "[1, 2]")])

        with self.assertRaises(DecodeError):
            client.quote(QuoteRequest(input_mint="A", output_mint="B", amount=1))

    def test_wrong_shape_is_decode_error(self) -> None:
        client, _ = make_client([FakeResponse(200, {"lastValidBlockHeight": 1})])

        with self.assertRaises(DecodeError) as ctx:
            client.swap(SwapRequest(user_public_key="user", quote_response={}))
        self.assertEqual(ctx.exception.body, '{"lastValidBlockHeight": 1}')

    def test_float_block_height_is_decode_error(self) -> None:
        client, _ = make_client([FakeResponse(200, {"swapTransaction": "", "lastValidBlockHeight": 1.7})])

        with self.assertRaises(DecodeError):
            client.swap(SwapRequest(user_public_key="user", quote_response={}))

    def test_transport_failure_is_transport_error(self) -> None:
        client, _ = make_client([requests.ConnectionError("connection refused")])

        with self.assertRaises(TransportError) as ctx:
            client.swap_instructions(SwapRequest(user_public_key="user", quote_response={}))
        self.assertIsNone(ctx.exception.http_status)
        self.assertIsInstance(ctx.exception.cause, requests.ConnectionError)


class TransportOptionsTests(unittest.TestCase):
    def test_timeout_defaults_to_config_and_can_be_overridden(self) -> None:
        client, session = make_client([FakeResponse(200, {}), FakeResponse(200, {})], timeout=5.0)
        request = QuoteRequest(input_mint="A", output_mint="B", amount=1)

        client.quote(request)
        client.quote(request, timeout=0.5)

        self.assertEqual(session.calls[0]["timeout"], 5.0)
        self.assertEqual(session.calls[1]["timeout"], 0.5)

    def test_trailing_slash_base_url(self) -> None:
        client, session = make_client([FakeResponse(200, {})], base_url="https://quote.example/v6/")

        client.quote(QuoteRequest(input_mint="A", output_mint="B", amount=1))

        self.assertEqual(session.last_call()["url"], "https://quote.example/v6/quote")

    def test_join_url(self) -> None:
        self.assertEqual(join_url("https://a/b", "quote"), "https://a/b/quote")
        self.assertEqual(join_url("https://a/b/", "/quote"), "https://a/b/quote")

    def test_close_releases_session(self) -> None:
        client, session = make_client([])

        with client:
            pass

        self.assertTrue(session.closed)


if __name__ == "__main__":
    unittest.main()
