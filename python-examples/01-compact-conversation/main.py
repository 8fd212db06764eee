"""
Compact a long conversation before sending it onward.

Set OPENAI_API_KEY (or put it in a .env file), then run:
    python main.py
"""

import asyncio
import logging

from dotenv import load_dotenv

from context_compaction import CompactionClient

load_dotenv()


def build_history(turns: int) -> list[dict]:
    """Build a long synthetic chat history."""
    history = []
    for i in range(turns):
        history.append({"role": "human", "content": f"Question {i}: " + "tell me more " * 2000})
        history.append({"role": "ai", "content": f"Answer {i}: " + "here is more " * 2000})
    return history


async def main():
    logging.basicConfig(level=logging.DEBUG)

    client = CompactionClient(
        model="gpt-5.2",
        config={"enabled": True, "threshold_percent": 0.70},
    )

    history = build_history(turns=60)
    print(f"Estimated tokens: {client.estimate_conversation_tokens(history)}")

    result = await client.compact(history, instructions="You are a helpful assistant.")

    if result.compacted:
        print(f"Compacted {result.original_tokens} -> {result.compacted_tokens} tokens")
        print(f"Next request input has {len(result.compacted_input)} items")
    else:
        print(f"Not compacted; sending {result.original_tokens} tokens as-is")


if __name__ == "__main__":
    asyncio.run(main())
