"""
Localized status labels.

The simulation core never depends on translations for its numbers; it only
asks for a label when a component's thermal status is rendered. Any object
with a ``translate(key, language)`` method can be passed in.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Protocol

import redis

from ebike_sim.config import settings
from ebike_sim.database import get_redis_client

logger = logging.getLogger(__name__)


class Language(str, Enum):
    PRIMARY = "ru"
    SECONDARY = "en"


class Translator(Protocol):
    def translate(self, key: str, language: Language) -> Optional[str]:
        ...


DEFAULT_TRANSLATIONS: Dict[str, Dict[Language, str]] = {
    # Motor / controller
    "criticalOverheating": {Language.PRIMARY: "Критический перегрев", Language.SECONDARY: "Critical overheating"},
    "overheating": {Language.PRIMARY: "Перегрев", Language.SECONDARY: "Overheating"},
    "warm": {Language.PRIMARY: "Тепло", Language.SECONDARY: "Warm"},
    "standard": {Language.PRIMARY: "Норма", Language.SECONDARY: "Standard"},
    # Battery
    "criticalCold": {Language.PRIMARY: "Критически холодно", Language.SECONDARY: "Critically cold"},
    "veryCold": {Language.PRIMARY: "Очень холодно", Language.SECONDARY: "Very cold"},
    "cold": {Language.PRIMARY: "Холодно", Language.SECONDARY: "Cold"},
    "criticalHot": {Language.PRIMARY: "Критически жарко", Language.SECONDARY: "Critically hot"},
    "hot": {Language.PRIMARY: "Жарко", Language.SECONDARY: "Hot"},
    "optimal": {Language.PRIMARY: "Оптимально", Language.SECONDARY: "Optimal"},
}


class StaticTranslator:
    """
    In-memory translation table.
    """

    def __init__(self, table: Optional[Dict[str, Dict[Language, str]]] = None):
        self.table = DEFAULT_TRANSLATIONS if table is None else table

    def translate(self, key: str, language: Language) -> Optional[str]:
        return self.table.get(key, {}).get(Language(language))


class RedisTranslator:
    """
    Translation lookup backed by Redis hashes named ``<prefix>:<language>``.

    Store failures are treated as a missing translation.
    """

    def __init__(self, client: redis.Redis, prefix: str = "translations"):
        self.client = client
        self.prefix = prefix

    def translate(self, key: str, language: Language) -> Optional[str]:
        try:
            return self.client.hget(f"{self.prefix}:{Language(language).value}", key)
        except redis.RedisError as e:
            logger.warning(f"Translation store unavailable for '{key}': {str(e)}")
            return None

    def seed(self, table: Optional[Dict[str, Dict[Language, str]]] = None) -> int:
        """Write the given (or default) table into the store. Returns the number of fields written."""
        table = DEFAULT_TRANSLATIONS if table is None else table
        written = 0
        for language in Language:
            mapping = {key: labels[language] for key, labels in table.items() if language in labels}
            if mapping:
                written += self.client.hset(f"{self.prefix}:{language.value}", mapping=mapping)
        return written


def localize(translator: Optional[Translator], key: str, language: Language = Language.PRIMARY) -> str:
    """
    Resolve a label, degrading to the raw key if no translation is available.
    """
    if translator is None:
        return key
    try:
        text = translator.translate(key, language)
    except Exception as e:
        logger.error(f"Translator failed for '{key}': {str(e)}")
        return key
    return text or key


def get_translator() -> Translator:
    """Redis-backed translator when a store is configured, otherwise the static table."""
    client = get_redis_client()
    if client is None:
        return StaticTranslator()
    return RedisTranslator(client, prefix=settings.REDIS_TRANSLATION_PREFIX)
