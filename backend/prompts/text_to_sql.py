"""
LangChain prompt templates for text-to-SQL generation.
"""
from langchain_core.prompts import PromptTemplate

# ── System instruction ────────────────────────────────────────────────────────

SQL_SYSTEM_PROMPT = """\
You are a PostgreSQL SQL query generator. Given a database schema and a natural language question, generate a SELECT query that answers the question.

Rules:
- ONLY generate SELECT queries. Never generate INSERT, UPDATE, DELETE, DROP, or any DDL.
- Generate exactly one statement.
- Use proper PostgreSQL syntax.
- Return ONLY valid SQL, no markdown or explanation in the sql field.
- If you cannot answer the question with the given schema, explain why.

Respond in this exact JSON format:
{"sql": "SELECT ...", "explanation": "Brief explanation of what the query does"}
"""

# ── User message ──────────────────────────────────────────────────────────────

SQL_USER_TEMPLATE = """\
Schema:
{schema_summary}

Question: {question}"""

sql_user_prompt = PromptTemplate(
    input_variables=["schema_summary", "question"],
    template=SQL_USER_TEMPLATE,
)
