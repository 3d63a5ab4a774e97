"""
Reasoner Client
===============

Thin wrapper around the nilAI chat completions endpoint.

nilAI speaks the OpenAI wire format, so the official OpenAI client is
pointed at NILAI_BASE_URL. Each call is a single non-streaming POST to
<base_url>/chat/completions:

    {model, messages, temperature: 0.2, top_p: 0.95,
     max_tokens: 2048, stream: false, nilrag: {}}

The sampling parameters are fixed so that the decision and formatting
calls behave the same way every time. Retries are disabled: a failed call
raises ReasonerUnavailable and the dispatch call is over.
"""

from typing import Sequence

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from hederabot.agent.context import Message
from hederabot.errors import ReasonerTimeout, ReasonerUnavailable
from hederabot.utils.logger import Logger

logger = Logger("Reasoner")

TEMPERATURE = 0.2
TOP_P = 0.95
MAX_TOKENS = 2048


class ReasonerClient:
    """
    Sends a conversation to the reasoner and returns its reply text.

    Example:
        reasoner = ReasonerClient(api_key, "https://nilai.example/v1", model)
        text = await reasoner.complete([
            Message("system", "You are a Hedera blockchain assistant."),
            Message("user", "Hello"),
        ])
        await reasoner.aclose()
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None
    ):
        """
        Args:
            api_key: Bearer token for the endpoint
            base_url: Base URL; /chat/completions is appended
            model: Model identifier
            timeout: Seconds to wait for one completion
            http_client: Optional preconfigured httpx client (tests use a mock transport)
        """
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

        self.openai = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    async def complete(self, messages: Sequence[Message]) -> str:
        """
        Get one completion for a conversation.

        Args:
            messages: Ordered messages, system first

        Returns:
            The reply text of the first choice

        Raises:
            ReasonerTimeout: If the call exceeded the timeout
            ReasonerUnavailable: On connection errors, non-2xx responses,
                or a response without choices[0].message.content
        """
        logger.debug(f"Requesting completion ({len(messages)} messages)")

        try:
            response = await self.openai.chat.completions.create(
                model=self.model,
                messages=[message.to_dict() for message in messages],
                temperature=TEMPERATURE,
                top_p=TOP_P,
                max_tokens=MAX_TOKENS,
                stream=False,
                extra_body={"nilrag": {}},
            )
        except APITimeoutError as e:
            raise ReasonerTimeout(f"Reasoner timed out after {self.timeout} seconds") from e
        except APIStatusError as e:
            raise ReasonerUnavailable(
                f"Reasoner returned HTTP {e.status_code}",
                status_code=e.status_code,
                payload=e.body,
            ) from e
        except APIConnectionError as e:
            raise ReasonerUnavailable(f"Could not reach reasoner: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ReasonerUnavailable(
                "Reasoner response has no choices",
                payload=_dump(response),
            ) from e

        if content is None:
            raise ReasonerUnavailable(
                "Reasoner response has no message content",
                payload=_dump(response),
            )

        logger.debug(f"Completion received ({len(content)} chars)")
        return content

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self.openai.close()


def _dump(response) -> object:
    try:
        return response.model_dump()
    except AttributeError:
        return repr(response)
