"""
FastAPI dependencies for shared resources built once in the app lifespan.
"""
from fastapi import Request

from core.connection_store import ConnectionStore
from core.text_to_sql import SQLGenerator
from integrations.llm_client import LLMClient


def get_store(request: Request) -> ConnectionStore:
    return request.app.state.connection_store


def get_llm_client(request: Request) -> LLMClient:
    return request.app.state.llm_client


def get_generator(request: Request) -> SQLGenerator:
    return request.app.state.sql_generator
