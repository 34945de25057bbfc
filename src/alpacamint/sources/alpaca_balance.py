"""Fetch the Alpaca portfolio value and return it as an 18-decimal uint256.

Runs inside the functions host: ``request`` carries the ``alpacaKey`` and
``alpacaSecret`` secrets, ``functions`` provides HTTP and encoding helpers.
An optional first argument overrides the API base URL.
"""

from loguru import logger
from pydantic import ValidationError

from alpacamint.errors import ParseError
from alpacamint.models import AccountInfo, Credentials

PAPER_API_URL = "https://paper-api.alpaca.markets"


async def main(request, functions) -> bytes:
    credentials = Credentials.require(
        request.secrets.get("alpacaKey"),
        request.secrets.get("alpacaSecret"),
    )
    base_url = request.args[0] if request.args else PAPER_API_URL

    response = await functions.make_http_request(
        url=f"{base_url.rstrip('/')}/v2/account",
        headers={
            "accept": "application/json",
            "APCA-API-KEY-ID": credentials.api_key.get_secret_value(),
            "APCA-API-SECRET-KEY": credentials.api_secret.get_secret_value(),
        },
    )

    try:
        account = AccountInfo.model_validate(response.data)
    except ValidationError as exc:
        raise ParseError(f"Unexpected account payload: {exc.errors()[0]['msg']}") from exc
    portfolio_balance = account.require_portfolio_value()
    logger.info("Alpaca Portfolio Balance: ${}", portfolio_balance)

    # the consumer contract expects the balance scaled to 18 decimals
    return functions.encode_uint256(functions.to_fixed_point(portfolio_balance))
