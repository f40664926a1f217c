"""Basic usage example for deepl-client.

This example shows how to:
1. Create a client from the environment
2. Translate a text
3. Check the usage statistics
4. Translate a document
"""

import asyncio
import os
import sys

from deepl_client import DeepLClient, DeepLError, Language


async def main() -> None:
    """Translate a text and an optional document."""
    # 1. Setup client
    auth_key = os.getenv("DEEPL_AUTH_KEY")
    if not auth_key:
        print("Error: DEEPL_AUTH_KEY environment variable not set")
        return

    async with DeepLClient(auth_key, use_free_api=auth_key.endswith(":fx")) as client:
        # 2. Translate text, letting DeepL detect the source language
        translation = await client.translate_text(
            "The quick brown fox jumps over the lazy dog.", target_language=Language.GERMAN
        )
        print(f"Detected source language: {translation.detected_source_language}")
        print(f"Translation: {translation.text}")

        # 3. Usage statistics
        usage = await client.get_usage_statistics()
        print(f"\nCharacters used: {usage.character_count} / {usage.character_limit}")

        # 4. Translate a document given on the command line
        if len(sys.argv) == 3:
            try:
                await client.translate_document(
                    sys.argv[1], sys.argv[2], target_language=Language.GERMAN
                )
                print(f"\nTranslated document written to {sys.argv[2]}")
            except DeepLError as e:
                print(f"\nDocument translation failed: {e}")


if __name__ == "__main__":
    asyncio.run(main())
