"""
Text-to-SQL generator — asks the language model for one SELECT statement
answering a natural-language question about a cached schema snapshot.

The model is untrusted: whatever comes back here must still pass the safety
gate before it goes anywhere near a database.
"""
import json
import logging

import httpx

from core.errors import AIUnavailableError, GenerationError
from core.prompt_builder import build_schema_summary
from integrations.llm_client import LLMClient
from models.query import GeneratedSQL
from models.schema import ExtractedSchema
from prompts.text_to_sql import SQL_SYSTEM_PROMPT, sql_user_prompt

logger = logging.getLogger(__name__)


def _strip_fences(content: str) -> str:
    """Remove a markdown code fence the model may have wrapped around its JSON."""
    text = content.strip()
    for fence in ("```json", "```JSON", "```"):
        if text.startswith(fence):
            text = text[len(fence):]
            break
    return text.rstrip("`").strip()


def parse_generation(content: str) -> GeneratedSQL:
    """Parse the model's reply into {sql, explanation} or raise GenerationError."""
    if not content or not content.strip():
        raise GenerationError("No response from AI model")
    try:
        parsed = json.loads(_strip_fences(content))
    except json.JSONDecodeError as e:
        raise GenerationError(f"AI response is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise GenerationError("AI response is not a JSON object")
    sql = parsed.get("sql")
    explanation = parsed.get("explanation", "")
    if not isinstance(sql, str) or not sql.strip():
        # the model may explain why it cannot answer instead of giving SQL
        reason = explanation if isinstance(explanation, str) and explanation else "no SQL returned"
        raise GenerationError(f"AI could not generate a query: {reason}")
    if not isinstance(explanation, str):
        raise GenerationError("AI response has a non-string explanation")
    return GeneratedSQL(sql=sql.strip(), explanation=explanation.strip())


class SQLGenerator:
    def __init__(self, client: LLMClient):
        self.client = client

    def generate(self, schema: ExtractedSchema, question: str) -> GeneratedSQL:
        if not self.client.enabled:
            raise AIUnavailableError("AI is not enabled. Set LLM_API_KEY to use text-to-SQL.")

        user_msg = sql_user_prompt.format(
            schema_summary=build_schema_summary(schema),
            question=question,
        )
        messages = [
            {"role": "system", "content": SQL_SYSTEM_PROMPT},
            {"role": "user",   "content": user_msg},
        ]
        logger.info("Generating SQL for question: %s", question[:80])
        try:
            content = self.client.chat_json(messages, temperature=0.0)
        except httpx.HTTPError as e:
            logger.warning("LLM request failed: %s", e)
            raise GenerationError(f"AI request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise GenerationError(f"Malformed AI response envelope: {e}") from e

        generated = parse_generation(content)
        logger.info("Generated SQL (%d chars)", len(generated.sql))
        return generated
