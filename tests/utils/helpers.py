"""
Test Helpers
============

Helper functions for common testing operations.
"""

import asyncio
import json
import time
from typing import Any, AsyncIterator, Callable, Dict, List, Optional


async def wait_for_condition(
    condition: Callable[[], bool],
    timeout: float = 5.0,
    interval: float = 0.01,
    error_message: str = "Condition not met within timeout",
) -> None:
    """Wait for a condition to become true."""
    start_time = time.time()

    while time.time() - start_time < timeout:
        if condition():
            return
        await asyncio.sleep(interval)

    raise TimeoutError(error_message)


async def read_messages(stream: AsyncIterator[Any], count: int, timeout: float = 5.0) -> List[str]:
    """Read ``count`` messages from an SSE body iterator."""
    messages: List[str] = []

    async def _read() -> None:
        async for message in stream:
            messages.append(message.decode() if isinstance(message, bytes) else message)
            if len(messages) >= count:
                return

    await asyncio.wait_for(_read(), timeout)
    return messages


def parse_sse_data(message: str) -> Optional[Dict[str, Any]]:
    """Decode the JSON ``data:`` line of an SSE message, or None for comments."""
    for line in message.splitlines():
        if line.startswith("data: "):
            return json.loads(line[len("data: "):])
    return None


def jsonrpc_request(method: str, params: Any = None, request_id: Any = 1) -> Dict[str, Any]:
    body: Dict[str, Any] = {"jsonrpc": "2.0", "method": method, "id": request_id}
    if params is not None:
        body["params"] = params
    return body


def tool_payload(result: Dict[str, Any]) -> Any:
    """Decode the JSON text of a wire tool result."""
    return json.loads(result["content"][0]["text"])
