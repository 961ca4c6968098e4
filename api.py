#!/usr/bin/env python3
import asyncio
import uuid
from typing import Iterable, List

import aiohttp

from config import Settings
from db import LocalStore, PersistenceError
from logger import setup_logger

logger = setup_logger('api')

REQUEST_TIMEOUT_SECONDS = 10


class RestStore:
    """List storage backed by a REST API.

    GET {base_url}/{key} returns the collection as a JSON array and
    PUT {base_url}/{key} replaces it with the array in the request body.
    """

    def __init__(self, base_url: str, timeout: float = REQUEST_TIMEOUT_SECONDS):
        self.base_url = (base_url or '').rstrip('/')
        if not self.base_url:
            raise ValueError("RestStore needs a base URL")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        logger.info(f"REST store endpoint: {self.base_url}")

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/{key.strip('/')}"

    def load_list(self, key: str) -> List[dict]:
        return asyncio.run(self.fetch_list(key))

    def save_list(self, key: str, items: Iterable[dict]):
        asyncio.run(self.replace_list(key, [dict(item) for item in items]))

    @staticmethod
    def generate_id() -> str:
        return uuid.uuid4().hex

    async def fetch_list(self, key: str) -> List[dict]:
        url = self.url_for(key)
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url) as resp:
                    if not 200 <= resp.status < 300:
                        logger.warning(f"GET {url} -> {resp.status}")
                        raise PersistenceError(f"GET {url} failed with status {resp.status}")
                    data = await resp.json()
        except asyncio.TimeoutError as e:
            logger.error(f"GET {url} -> timeout")
            raise PersistenceError(f"GET {url} timed out") from e
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"GET {url} -> error: {e}")
            raise PersistenceError(f"GET {url} failed: {e}") from e
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise PersistenceError(f"GET {url} did not return a list of objects")
        logger.debug(f"GET {url} -> {len(data)} item(s)")
        return data

    async def replace_list(self, key: str, items: List[dict]):
        url = self.url_for(key)
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.put(url, json=items) as resp:
                    if not 200 <= resp.status < 300:
                        logger.warning(f"PUT {url} -> {resp.status}")
                        raise PersistenceError(f"PUT {url} failed with status {resp.status}")
                    logger.debug(f"PUT {url} -> {resp.status}")
        except asyncio.TimeoutError as e:
            logger.error(f"PUT {url} -> timeout")
            raise PersistenceError(f"PUT {url} timed out") from e
        except aiohttp.ClientError as e:
            logger.error(f"PUT {url} -> error: {e}")
            raise PersistenceError(f"PUT {url} failed: {e}") from e


def open_store(settings: Settings):
    """Return the store selected by configuration."""
    if settings.storage == 'rest':
        return RestStore(settings.api_url)
    logger.info(f"Local storage: {settings.data_dir}")
    return LocalStore(settings.data_dir)
